import os
from dotenv import load_dotenv

from database import DB_PATH
from services.upstream import UPSTREAM_TIMEOUT

# Load environment variables from .env
load_dotenv()


class Config:
    """Settings read from the environment when the app is created."""

    def __init__(self):
        self.TMDB_API_KEY = os.getenv('TMDB_API_KEY', '')
        self.RAWG_API_KEY = os.getenv('RAWG_API_KEY', '')
        self.GEMINI_API_KEY = os.getenv('GEMINI_API_KEY') or os.getenv('API_KEY', '')
        self.TMDB_LANGUAGE = os.getenv('TMDB_LANGUAGE', 'pt-BR')
        self.UPSTREAM_TIMEOUT = float(os.getenv('UPSTREAM_TIMEOUT', UPSTREAM_TIMEOUT))
        self.DATABASE_PATH = os.getenv('DATABASE_PATH', DB_PATH)
        self.ADMIN_DEFAULT_PASSWORD = os.getenv('ADMIN_DEFAULT_PASSWORD')
        self.CORS_ORIGIN = os.getenv('CORS_ORIGIN', '*')
        self.PORT = int(os.getenv('PORT', '5000'))
        self.LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO').upper()
