"""Configuración del Core.

Por qué aquí:
- Centraliza variables de entorno (pydantic-settings) sin contaminar la CLI.
- Los valores del servlet/filtro de CometD son defaults razonables, pero se
  pueden sobreescribir por proyecto (`.env`) o por usuario.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def get_user_config_dir() -> Path:
    """Directorio de configuración por usuario (cross-platform, sin dependencias)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "roo-cometd"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "roo-cometd"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "roo-cometd"
    return Path.home() / ".config" / "roo-cometd"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


class AddonSettings(BaseSettings):
    """Configuración central del add-on.

    Por qué pydantic-settings:
    - Tipado + validación en el borde (env vars).
    - Un único contrato de configuración para CLI y servicios.
    """

    model_config = SettingsConfigDict(
        env_prefix="ROO_COMETD_",
        extra="ignore",
        case_sensitive=False,
        # Orden: proyecto primero, luego config global de usuario.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    servlet_name: str = Field(default="cometd", min_length=1)
    servlet_class: str = Field(default="org.cometd.server.CometdServlet", min_length=1)
    filter_name: str = Field(default="cross-origin", min_length=1)
    filter_class: str = Field(default="org.eclipse.jetty.servlets.CrossOriginFilter", min_length=1)
    url_pattern: str = Field(default="/cometd/*", min_length=1)
    load_on_startup: int = Field(default=1, ge=0)

    timeout_ms: int = Field(
        default=60000,
        gt=0,
        description="Long-poll timeout del servlet (param `timeout`).",
    )
    log_level: int = Field(
        default=3,
        ge=0,
        le=3,
        description="Verbosidad del servlet CometD (param `logLevel`).",
    )
    transports: str = Field(
        default="org.cometd.websocket.server.WebSocketTransport",
        description="Transportes adicionales, separados por coma (param `transports`).",
    )

    servlet_version: str = Field(
        default="3.0",
        pattern=r"^\d+\.\d+$",
        description="Versión del descriptor tras `cometd setup` (async requiere 3.0).",
    )
    downgrade_version: str = Field(
        default="2.5",
        pattern=r"^\d+\.\d+$",
        description="Versión del descriptor tras `cometd remove`.",
    )

    configuration_path: Path | None = Field(
        default=None,
        description="XML de dependencias/plugins alternativo al empaquetado.",
    )

    marker_annotation: str = Field(
        default="org.sillyweasel.rooaddons.cometd.RooCometd",
        min_length=1,
        description="Anotación que `annotate` añade a los tipos.",
    )
    trigger_annotation: str = Field(
        default="org.springframework.roo.addon.javabean.RooJavaBean",
        min_length=1,
        description="Tipos con esta anotación reciben el marker en `annotate-all`.",
    )

    console_log_level: str = Field(
        default="INFO",
        description="Nivel de logging de la CLI (DEBUG/INFO/WARNING).",
    )
