#!/usr/bin/env python3
"""
Startup script for the Team Task Manager backend.
Reload is on by default in development and off in production.
"""

import os

import uvicorn
from dotenv import load_dotenv

from app.config.security import SecurityConfig


def server_options():
    """uvicorn keyword arguments built from the environment"""
    default_reload = "false" if SecurityConfig.is_production() else "true"
    return {
        "host": os.getenv("HOST", "0.0.0.0"),
        "port": int(os.getenv("PORT", "8000")),
        "reload": os.getenv("RELOAD", default_reload).lower() == "true",
        "log_level": SecurityConfig.LOG_LEVEL.lower(),
        # Cookies are only marked secure behind TLS, so trust the proxy's scheme header
        "proxy_headers": SecurityConfig.is_production(),
    }


def main():
    load_dotenv()
    options = server_options()

    print("Starting Team Task Manager Backend Server...")
    print(f"Environment: {SecurityConfig.ENVIRONMENT}")
    print(f"Host: {options['host']}")
    print(f"Port: {options['port']}")
    print(f"Reload: {options['reload']}")
    print(f"CORS origins: {', '.join(SecurityConfig.get_cors_origins())}")
    print("=" * 50)

    uvicorn.run("main:app", **options)


if __name__ == "__main__":
    main()
