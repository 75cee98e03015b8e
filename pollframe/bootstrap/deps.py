import json
from functools import lru_cache

from pydantic import ValidationError

from pollframe.bootstrap.config.loader import get_cli_args
from pollframe.bootstrap.config.settings import PollFrameConfig
from pollframe.core.controlplane import ControlPlane
from pollframe.core.routing.app import FrameApplication
from pollframe.core.service.frame import FrameService


@lru_cache
def get_cp() -> ControlPlane:
    return ControlPlane(
        config=get_config(),
        app=get_app(),
    )


@lru_cache
def get_frames() -> FrameService:
    cp = get_cp()
    return cp.frames


@lru_cache
def get_app() -> FrameApplication:
    app = FrameApplication()
    return app


@lru_cache
def get_config() -> PollFrameConfig:
    overrides = {}
    cli = get_cli_args()
    if cli.port is not None:
        overrides["server"] = {"port": cli.port}

    try:
        return PollFrameConfig(**overrides)
    except FileNotFoundError as ex:
        raise SystemExit(f"Provide a correct configuration file path: {ex}")
    except ValidationError as ex:
        msg = ["Configuration validation failed:"]
        errs = json.loads(ex.json())
        for err in errs:
            msg.append(f"  {'.'.join(str(loc) for loc in err['loc'])}: {err['msg']}")
        raise SystemExit("\n".join(msg))
