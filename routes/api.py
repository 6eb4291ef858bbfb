# Every proxy and the admin backend; app.py registers them all at startup
from services.tmdb import tmdb_bp
from services.rawg import rawg_bp
from services.openlibrary import openlibrary_bp
from services.gemini import gemini_bp
from services.auth import auth_bp

CORE_BLUEPRINTS = [tmdb_bp, rawg_bp, openlibrary_bp, gemini_bp, auth_bp]

ALL_BLUEPRINTS = CORE_BLUEPRINTS
