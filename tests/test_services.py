"""Tests for the chat, upload and transcription clients."""
from unittest.mock import MagicMock

import pytest

from hookflow.config import Settings
from hookflow.errors import ConfigurationError, ExternalServiceError
from hookflow.services import (
    AssemblyAIClient,
    CloudinaryUploader,
    HttpClient,
    OpenAIChatClient,
    Services,
)

from conftest import http_response


@pytest.fixture
def http():
    return MagicMock(spec=HttpClient)


class TestOpenAIChatClient:

    def test_complete(self, http):
        http.post.return_value = http_response({"choices": [{"message": {"content": "hello"}}]})
        settings = Settings(openai_api_key="sk-test", openai_model="gpt-test", openai_max_tokens=50)

        completion = OpenAIChatClient(http, settings).complete("hi")

        assert completion.text == "hello"
        url = http.post.call_args.args[0]
        kwargs = http.post.call_args.kwargs
        assert url == "https://api.openai.com/v1/chat/completions"
        assert kwargs["headers"] == {"Authorization": "Bearer sk-test"}
        assert kwargs["body"] == {
            "model": "gpt-test",
            "messages": [
                {"role": "system", "content": "You are a helpful assistant."},
                {"role": "user", "content": "hi"},
            ],
            "max_tokens": 50,
        }

    def test_missing_key(self, http):
        with pytest.raises(ConfigurationError) as exc_info:
            OpenAIChatClient(http, Settings(openai_api_key=None)).complete("hi")

        assert exc_info.value.setting == "openai_api_key"
        http.post.assert_not_called()

    def test_unexpected_response_shape(self, http):
        http.post.return_value = http_response({"error": "nope"})

        with pytest.raises(ExternalServiceError, match="Unexpected response format"):
            OpenAIChatClient(http, Settings(openai_api_key="sk-test")).complete("hi")

    def test_null_content_becomes_empty_text(self, http):
        http.post.return_value = http_response({"choices": [{"message": {"content": None}}]})

        assert OpenAIChatClient(http, Settings(openai_api_key="sk-test")).complete("hi").text == ""


class TestCloudinaryUploader:

    @pytest.fixture
    def settings(self):
        return Settings(
            cloudinary_cloud_name="demo",
            cloudinary_api_key="key",
            cloudinary_api_secret="secret",
        )

    def test_upload(self, http, settings):
        http.request.return_value = http_response({"secure_url": "https://res.cloudinary.com/demo/a.webm"})

        result = CloudinaryUploader(http, settings).upload("QUJD", "voice.webm")

        assert result == {"secure_url": "https://res.cloudinary.com/demo/a.webm"}
        args = http.request.call_args
        assert args.args == ("POST", "https://api.cloudinary.com/v1_1/demo/auto/upload")
        files = args.kwargs["files"]
        assert files["file"] == (None, "data:application/octet-stream;base64,QUJD")
        assert files["upload_preset"] == (None, "unsigned")
        assert files["filename_override"] == (None, "voice.webm")

    def test_non_dict_response_wrapped(self, http, settings):
        http.request.return_value = http_response("done")

        assert CloudinaryUploader(http, settings).upload("QUJD") == {"response": "done"}

    @pytest.mark.parametrize("missing", ["cloudinary_cloud_name", "cloudinary_api_key", "cloudinary_api_secret"])
    def test_missing_credentials(self, http, missing):
        values = {
            "cloudinary_cloud_name": "demo",
            "cloudinary_api_key": "key",
            "cloudinary_api_secret": "secret",
            missing: None,
        }

        with pytest.raises(ConfigurationError) as exc_info:
            CloudinaryUploader(http, Settings(**values)).upload("QUJD")

        assert exc_info.value.setting == missing
        http.request.assert_not_called()


class TestAssemblyAIClient:

    def test_create_and_get_transcript(self, http):
        http.post.return_value = http_response({"id": "t1", "status": "queued"})
        http.get.return_value = http_response({"id": "t1", "status": "completed", "text": "hi"})
        client = AssemblyAIClient(http, Settings(assemblyai_api_key="aai"))

        assert client.create_transcript("https://cdn.example.com/a.webm")["id"] == "t1"
        assert client.get_transcript("t1")["text"] == "hi"

        assert http.post.call_args.args[0] == "https://api.assemblyai.com/v2/transcript"
        assert http.post.call_args.kwargs["body"] == {"audio_url": "https://cdn.example.com/a.webm"}
        assert http.post.call_args.kwargs["headers"] == {"Authorization": "aai"}
        assert http.get.call_args.args[0] == "https://api.assemblyai.com/v2/transcript/t1"

    def test_missing_key(self, http):
        with pytest.raises(ConfigurationError):
            AssemblyAIClient(http, Settings(assemblyai_api_key=None)).create_transcript("x")


class TestServices:

    def test_from_settings(self):
        settings = Settings(http_timeout_s=12, wait_default_s=3)

        services = Services.from_settings(settings)

        assert services.http.timeout == 12
        assert services.wait_default_s == 3
        assert isinstance(services.chat, OpenAIChatClient)
        assert isinstance(services.uploader, CloudinaryUploader)
        assert isinstance(services.transcription, AssemblyAIClient)
