import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'dev-secret-key-change-in-production'
    BASE_DIR = os.path.dirname(os.path.abspath(__file__))
    # Use environment variable for DB if available (important for production)
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or f"sqlite:///{os.path.join(BASE_DIR, 'catalog.db')}"
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Upload limit for import files (bytes)
    MAX_CONTENT_LENGTH = int(os.environ.get('MAX_CONTENT_LENGTH', 50 * 1024 * 1024))

    # Import Settings
    IMPORT_BATCH_SIZE = int(os.environ.get('IMPORT_BATCH_SIZE', '100'))
    IMPORT_BATCH_DELAY = float(os.environ.get('IMPORT_BATCH_DELAY', '0.01'))
    IMPORT_BATCH_LOGGING = os.environ.get('IMPORT_BATCH_LOGGING', 'true').lower() in ('true', '1', 'yes')

    # Brand / category list cache (seconds)
    CATALOG_CACHE_TTL = int(os.environ.get('CATALOG_CACHE_TTL', '1800'))

    # Listing
    DEFAULT_PAGE_SIZE = 50
    MAX_PAGE_SIZE = 200
    MAX_BULK_ITEMS = 500

class DevelopmentConfig(Config):
    DEBUG = True

class ProductionConfig(Config):
    DEBUG = False

class TestingConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    IMPORT_BATCH_DELAY = 0.0
    CATALOG_CACHE_TTL = 0

config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}
