"""Generated files of a Capacitor project."""

import json
from typing import Any

from webtoapk.models.app_config import AppConfig


CAPACITOR_WEB_DIR = "www"
PROJECT_DIRECTORIES = ("www", "src", "android")


def npm_package_name(package_name: str) -> str:
    """``com.example.App`` becomes ``com-example-app``."""
    return package_name.lower().replace(".", "-")


def build_package_json(
    config: AppConfig,
    core_version: str = "^6.0.0",
    cli_version: str = "^5.7.0",
    android_version: str = "^6.0.0",
) -> dict[str, Any]:
    return {
        "name": npm_package_name(config.package_name),
        "version": config.version,
        "description": f"{config.app_name} - Generated by Web-to-APK",
        "main": "index.js",
        "scripts": {
            "build": "cap sync",
            "open": "cap open android",
            "sync": "cap sync android",
        },
        "dependencies": {
            "@capacitor/core": core_version,
            "@capacitor/android": android_version,
        },
        "devDependencies": {
            "@capacitor/cli": cli_version,
        },
    }


def build_capacitor_config(config: AppConfig) -> dict[str, Any]:
    capacitor_config: dict[str, Any] = {
        "appId": config.package_name,
        "appName": config.app_name,
        "webDir": CAPACITOR_WEB_DIR,
        "plugins": config.plugins or {},
    }
    # Remote start URLs are loaded by the WebView directly
    if config.start_url.startswith("http"):
        capacitor_config["server"] = {"url": config.start_url, "cleartext": True}
    return capacitor_config


def render_capacitor_config(config: AppConfig) -> str:
    """TypeScript source of ``capacitor.config.ts``."""
    body = json.dumps(build_capacitor_config(config), indent=2)
    return (
        "import { CapacitorConfig } from '@capacitor/cli';\n"
        "\n"
        f"const config: CapacitorConfig = {body};\n"
        "\n"
        "export default config;\n"
    )


def render_package_json(config: AppConfig, **versions: str) -> str:
    return json.dumps(build_package_json(config, **versions), indent=2)


__all__ = [
    "CAPACITOR_WEB_DIR",
    "PROJECT_DIRECTORIES",
    "build_capacitor_config",
    "build_package_json",
    "npm_package_name",
    "render_capacitor_config",
    "render_package_json",
]
