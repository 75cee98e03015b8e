import asyncio
import os

from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from pollframe.bootstrap.config.settings import PollFrameConfig


class FakePollFrameConfig(PollFrameConfig):
    """Reads its YAML file from TEST_POLLFRAMECONFIG instead of the CLI."""

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        yaml_file = os.environ.get("TEST_POLLFRAMECONFIG")
        return cls.yaml_sources(settings_cls, init_settings, env_settings, yaml_file)


def http_request(method: str, path: str = "/", body: bytes = b"", content_length: bool = True) -> bytes:
    head = f"{method} {path} HTTP/1.1\r\nHost: localhost:8080\r\n"
    if content_length and (body or method == "POST"):
        head += f"Content-Length: {len(body)}\r\n"
    return head.encode("ascii") + b"\r\n" + body


async def read_response(reader: asyncio.StreamReader) -> tuple[str, dict[str, str], bytes]:
    head = await reader.readuntil(b"\r\n\r\n")
    lines = head.decode("latin-1").split("\r\n")
    headers = {}
    for line in lines[1:]:
        if not line:
            continue
        name, _, value = line.partition(":")
        headers[name.strip().lower()] = value.strip()

    body = await reader.readexactly(int(headers["content-length"]))
    return lines[0], headers, body
