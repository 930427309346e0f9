"""
Deployment Configuration

Architectural Intent:
- Fully resolved, immutable description of one application deployment
- Produced only by the config resolver; every default is already filled
- Collections are fresh copies so no caller observes shared mutation
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

DEFAULT_IMAGE = "kadirahq/meteord"
DEFAULT_FRONTEND_IMAGE = "meteorhacks/mup-frontend-server"
DEFAULT_IMAGE_PORT = 80
DEFAULT_SSL_PORT = 443
DEFAULT_BIND = "0.0.0.0"
DEFAULT_UPLOAD_LIMIT = "10M"
DEFAULT_LOG_OPTS = {"max-size": "100m", "max-file": 10}
DEFAULT_DEPLOY_CHECK_WAIT_TIME = 60
DEFAULT_APP_PORT = 80


@dataclass(frozen=True)
class DockerConfig:
    image: str = DEFAULT_IMAGE
    image_frontend_server: str = DEFAULT_FRONTEND_IMAGE
    image_port: int = DEFAULT_IMAGE_PORT
    bind: Optional[str] = None
    extra: Mapping[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        data = dict(self.extra)
        data.update(
            image=self.image,
            imageFrontendServer=self.image_frontend_server,
            imagePort=self.image_port,
        )
        if self.bind:
            data["bind"] = self.bind
        return data


@dataclass(frozen=True)
class SslConfig:
    crt: Optional[str] = None
    key: Optional[str] = None
    port: int = DEFAULT_SSL_PORT
    autogenerate: Any = None
    upload: Optional[bool] = None

    @property
    def fully_automatic(self) -> bool:
        return isinstance(self.autogenerate, Mapping)

    @property
    def uploads_certificates(self) -> bool:
        return self.upload is not False

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"port": self.port}
        if self.crt is not None:
            data["crt"] = self.crt
        if self.key is not None:
            data["key"] = self.key
        if self.autogenerate is not None:
            data["autogenerate"] = self.autogenerate
        if self.upload is not None:
            data["upload"] = self.upload
        return data


@dataclass(frozen=True)
class LogConfig:
    opts: Mapping[str, Any] = field(default_factory=lambda: dict(DEFAULT_LOG_OPTS))

    def to_dict(self) -> dict[str, Any]:
        return {"opts": dict(self.opts)}


@dataclass(frozen=True)
class NginxConfig:
    client_upload_limit: str = DEFAULT_UPLOAD_LIMIT


@dataclass(frozen=True)
class BuildOptions:
    build_location: Optional[str] = None
    server: Optional[str] = None
    server_only: bool = False
    debug: bool = False
    architecture: Optional[str] = None
    executable: str = "meteor"

    def with_location(self, build_location: str) -> "BuildOptions":
        return BuildOptions(
            build_location=build_location,
            server=self.server,
            server_only=self.server_only,
            debug=self.debug,
            architecture=self.architecture,
            executable=self.executable,
        )


@dataclass(frozen=True)
class ServerConfig:
    host: str
    username: str = "root"
    port: int = 22
    pem: Optional[str] = None
    password: Optional[str] = field(default=None, repr=False)
    env: Mapping[str, Any] = field(default_factory=dict)

    @property
    def server_host(self) -> Optional[str]:
        value = self.env.get("SERVER_HOST")
        return None if value is None else str(value)


@dataclass(frozen=True)
class DeploymentConfig:
    name: str
    path: str = "."
    docker: DockerConfig = field(default_factory=DockerConfig)
    ssl: Optional[SslConfig] = None
    env: Mapping[str, Any] = field(default_factory=dict)
    log: LogConfig = field(default_factory=LogConfig)
    nginx: NginxConfig = field(default_factory=NginxConfig)
    volumes: Mapping[str, str] = field(default_factory=dict)
    build_options: BuildOptions = field(default_factory=BuildOptions)
    servers: Mapping[str, ServerConfig] = field(default_factory=dict)
    enable_upload_progress_bar: bool = False
    deploy_check_wait_time: int = DEFAULT_DEPLOY_CHECK_WAIT_TIME
    deploy_check_port: Optional[int] = None
    use_local_mongo: bool = False

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Deployment name cannot be empty")

    @property
    def app_dir(self) -> str:
        return f"/opt/{self.name}"

    @property
    def bind_address(self) -> str:
        return self.docker.bind or DEFAULT_BIND

    @property
    def app_port(self) -> Any:
        return self.env.get("PORT") or DEFAULT_APP_PORT

    @property
    def verification_port(self) -> Any:
        return self.deploy_check_port or self.env.get("PORT") or DEFAULT_APP_PORT
