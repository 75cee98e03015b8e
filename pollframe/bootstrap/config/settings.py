from pathlib import Path
from typing import Annotated

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict, PydanticBaseSettingsSource, YamlConfigSettingsSource

from pollframe.bootstrap.config.loader import get_configfile
from pollframe.core.models.inputs import KEY_SLOTS
from pollframe.core.render.encoding import FrameEncoding


class ServerSettings(BaseModel):
    host: Annotated[
        str,
        Field(
            description="Bind address. The default listens on all interfaces.",
            default="0.0.0.0"
        )
    ]

    port: Annotated[
        int,
        Field(
            description="TCP port the browser connects to. 0 lets the OS pick one.",
            default=8080,
            ge=0,
            le=65535
        )
    ]

    backlog: Annotated[
        int,
        Field(
            description=(
                "Maximum number of pending TCP connections.\n"
                "With the default of 1, at most one more browser waits in the\n"
                "kernel queue while another one is being served."
            ),
            default=1,
            ge=0
        )
    ]

    limit_concurrency: Annotated[
        int,
        Field(
            description=(
                "Maximum number of browser sessions served at the same time.\n"
                "1 serves one connection to completion before accepting the next.\n"
                "All sessions share the same world."
            ),
            default=1,
            gt=0
        )
    ]

    read_timeout: Annotated[
        Annotated[float, Field(gt=0)] | None,
        Field(
            description=(
                "Close a session that sends no complete request for this many\n"
                "seconds, so the next browser can be served. Null waits forever."
            ),
            default=None
        )
    ]

    max_buffer_size: Annotated[
        int,
        Field(
            description="Maximum allowed buffer size for one incoming request.",
            default=64 * 1024,
            gt=0
        )
    ]

    timeout_graceful_shutdown: Annotated[
        float,
        Field(
            description="Maximum time allowed for graceful shutdown.",
            default=5.0,
            ge=0
        )
    ]


class FrameSettings(BaseModel):
    width: Annotated[
        int,
        Field(description="Frame width in pixels.", default=256, gt=0)
    ]

    height: Annotated[
        int,
        Field(description="Frame height in pixels.", default=256, gt=0)
    ]

    pacing_ms: Annotated[
        float,
        Field(
            description=(
                "Minimum time between two responses on one connection, in\n"
                "milliseconds. The default of 100 paces the loop at 10 frames\n"
                "per second. 0 disables pacing."
            ),
            default=100.0,
            ge=0
        )
    ]

    encoding: Annotated[
        FrameEncoding,
        Field(
            description=(
                "Wire format of frames: 'raw' sends the RGBA bytes as they are,\n"
                "'json' sends them as a JSON array of numbers."
            ),
            default=FrameEncoding.raw
        )
    ]

    key_slots: Annotated[
        int,
        Field(
            description="Length of the key flag vector posted by the page.",
            default=KEY_SLOTS,
            gt=0
        )
    ]


class SceneSettings(BaseModel):
    speed: Annotated[
        float,
        Field(description="Pixels travelled per frame while an arrow key is held.", default=8.0)
    ]

    radius: Annotated[
        float,
        Field(description="Half the side of the hero square, in pixels.", default=4.0, ge=0)
    ]


class PollFrameConfig(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="POLLFRAME_",
        env_nested_delimiter="__",
        extra="allow"
    )

    server: Annotated[
        ServerSettings,
        Field(
            description=(
                "Listener configuration.\n"
                "Controls where the server listens, how many browsers it serves\n"
                "at once, and the limits applied to every connection."
            ),
            default_factory=ServerSettings
        )
    ]

    frame: Annotated[
        FrameSettings,
        Field(
            description=(
                "Frame loop configuration.\n"
                "Defines the size and wire format of the pixel buffer and the\n"
                "pacing of responses."
            ),
            default_factory=FrameSettings
        )
    ]

    scene: Annotated[
        SceneSettings,
        Field(
            description="Parameters of the demo scene.",
            default_factory=SceneSettings
        )
    ]

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return cls.yaml_sources(settings_cls, init_settings, env_settings, get_configfile())

    @staticmethod
    def yaml_sources(
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        yaml_file: Path | None,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        sources = [init_settings, env_settings]
        if yaml_file is not None:
            sources.append(YamlConfigSettingsSource(settings_cls, yaml_file=yaml_file))
        return tuple(sources)

    @property
    def pacing_interval(self) -> float:
        return self.frame.pacing_ms / 1000.0
