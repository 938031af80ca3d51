# app/config/security.py
# Security and runtime configuration for the task manager API

import os
from typing import List

from dotenv import load_dotenv

load_dotenv()


class SecurityConfig:
    """Security configuration for the application"""

    # Session token settings
    AUTH = {
        'secret_key': os.getenv('SECRET_KEY', 'change-me-in-production'),
        'algorithm': os.getenv('ALGORITHM', 'HS256'),
        'token_expire_days': int(os.getenv('ACCESS_TOKEN_EXPIRE_DAYS', 7)),
    }

    # Password hashing
    PASSWORD = {
        'bcrypt_rounds': int(os.getenv('BCRYPT_ROUNDS', 10)),
    }

    # Session cookie
    COOKIE = {
        'name': 'access-token',
        'samesite': 'strict',
        'httponly': True,
        'path': '/',
    }

    # Onboarding
    REGISTRATION = {
        'default_role': os.getenv('DEFAULT_USER_ROLE', 'employee'),
    }

    ENVIRONMENT = os.getenv('ENVIRONMENT', 'development')
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')

    @classmethod
    def is_production(cls) -> bool:
        return cls.ENVIRONMENT.lower() == 'production'

    @classmethod
    def cookie_max_age(cls) -> int:
        """Cookie lifetime in seconds, matching the token expiry"""
        return cls.AUTH['token_expire_days'] * 24 * 60 * 60

    @classmethod
    def get_cors_origins(cls) -> List[str]:
        raw = os.getenv('CORS_ORIGINS', 'http://localhost:3000,http://127.0.0.1:3000')
        return [origin.strip() for origin in raw.split(',') if origin.strip()]
