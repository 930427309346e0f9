"""
Config Resolver

Architectural Intent:
- Turns the raw project mapping (as loaded from mup.json) into a
  DeploymentConfig with every default filled and legacy fields migrated
- Pure function: the raw mapping is only read, never written
- Absence of the deployment section is a MissingConfiguration
"""

from __future__ import annotations
import logging
from typing import Any, Mapping, Optional

from pymup.domain.entities.deployment_config import (
    DEFAULT_DEPLOY_CHECK_WAIT_TIME,
    DEFAULT_FRONTEND_IMAGE,
    DEFAULT_IMAGE,
    DEFAULT_IMAGE_PORT,
    DEFAULT_LOG_OPTS,
    DEFAULT_SSL_PORT,
    DEFAULT_UPLOAD_LIMIT,
    BuildOptions,
    DeploymentConfig,
    DockerConfig,
    LogConfig,
    NginxConfig,
    ServerConfig,
    SslConfig,
)
from pymup.domain.errors import MissingConfiguration

logger = logging.getLogger(__name__)

DEPLOYMENT_SECTION = "meteor"

_DOCKER_KEYS = {"image", "imageFrontendServer", "imagePort", "bind"}


def resolve_config(raw: Optional[Mapping[str, Any]]) -> DeploymentConfig:
    """Resolve the deployment section of a raw project config.

    Raises:
        MissingConfiguration: if the deployment section or its name is absent,
            or if it references a server that is not defined or has no host.
    """
    section = (raw or {}).get(DEPLOYMENT_SECTION)
    if not section:
        raise MissingConfiguration()
    if not section.get("name"):
        raise MissingConfiguration("meteor.name is required")

    return DeploymentConfig(
        name=str(section["name"]),
        path=str(section.get("path") or "."),
        docker=_resolve_docker(section),
        ssl=_resolve_ssl(section.get("ssl")),
        env=dict(section.get("env") or {}),
        log=_resolve_log(section.get("log")),
        nginx=NginxConfig(
            client_upload_limit=(section.get("nginx") or {}).get("clientUploadLimit")
            or DEFAULT_UPLOAD_LIMIT
        ),
        volumes=dict(section.get("volumes") or {}),
        build_options=_resolve_build_options(section.get("buildOptions")),
        servers=_resolve_servers(raw.get("servers") or {}, section.get("servers")),
        enable_upload_progress_bar=bool(section.get("enableUploadProgressBar")),
        deploy_check_wait_time=int(
            section.get("deployCheckWaitTime") or DEFAULT_DEPLOY_CHECK_WAIT_TIME
        ),
        deploy_check_port=_optional_int(section.get("deployCheckPort")),
        use_local_mongo=bool(raw.get("mongo")),
    )


def _resolve_docker(section: Mapping[str, Any]) -> DockerConfig:
    docker = section.get("docker") or {}
    image = docker.get("image") or section.get("dockerImage")
    if section.get("dockerImage"):
        logger.debug("Migrating legacy dockerImage field into docker.image")

    frontend = section.get("dockerImageFrontendServer") or docker.get(
        "imageFrontendServer"
    )
    return DockerConfig(
        image=image or DEFAULT_IMAGE,
        image_frontend_server=frontend or DEFAULT_FRONTEND_IMAGE,
        image_port=int(docker.get("imagePort") or DEFAULT_IMAGE_PORT),
        bind=docker.get("bind") or None,
        extra={k: v for k, v in docker.items() if k not in _DOCKER_KEYS},
    )


def _resolve_ssl(ssl: Optional[Mapping[str, Any]]) -> Optional[SslConfig]:
    if not ssl:
        return None
    return SslConfig(
        crt=ssl.get("crt"),
        key=ssl.get("key"),
        port=int(ssl.get("port") or DEFAULT_SSL_PORT),
        autogenerate=ssl.get("autogenerate"),
        upload=ssl.get("upload"),
    )


def _resolve_log(log: Optional[Mapping[str, Any]]) -> LogConfig:
    if log and log.get("opts") is not None:
        return LogConfig(opts=dict(log["opts"]))
    return LogConfig(opts=dict(DEFAULT_LOG_OPTS))


def _resolve_build_options(options: Optional[Mapping[str, Any]]) -> BuildOptions:
    options = options or {}
    return BuildOptions(
        build_location=options.get("buildLocation") or None,
        server=options.get("server") or None,
        server_only=bool(options.get("serverOnly")),
        debug=bool(options.get("debug")),
        architecture=options.get("architecture") or None,
        executable=options.get("executable") or "meteor",
    )


def _resolve_servers(
    defined: Mapping[str, Any], selected: Optional[Mapping[str, Any]]
) -> dict[str, ServerConfig]:
    """Select servers for the deployment, preserving configured order.

    When the deployment section lists servers, only those are used and their
    per-server env is overlaid on the top-level server env.
    """
    names = list(selected) if selected else list(defined)
    servers: dict[str, ServerConfig] = {}
    for name in names:
        if name not in defined:
            raise MissingConfiguration(f"server {name!r} is not defined in servers")
        info = defined[name] or {}
        if not info.get("host"):
            raise MissingConfiguration(f"server {name!r} has no host")
        overrides = (selected or {}).get(name) or {}
        env = dict(info.get("env") or {})
        env.update(overrides.get("env") or {})
        opts = info.get("opts") or {}
        servers[name] = ServerConfig(
            host=str(info["host"]),
            username=info.get("username") or "root",
            port=int(opts.get("port") or info.get("port") or 22),
            pem=info.get("pem"),
            password=info.get("password"),
            env=env,
        )
    return servers


def _optional_int(value: Any) -> Optional[int]:
    if value in (None, ""):
        return None
    return int(value)
