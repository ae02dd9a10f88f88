import os
from datetime import timedelta
from dotenv import load_dotenv

load_dotenv()

def _flag(name, default):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')

class Config:
    """Base configuration"""
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'dev-secret-key-change-in-production'
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///gsm.db'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {
        'pool_pre_ping': True,
        'pool_recycle': 300,
    }
    LOG_LEVEL = os.environ.get('LOG_LEVEL') or 'INFO'
    
    # Session configuration
    PERMANENT_SESSION_LIFETIME = timedelta(hours=8)
    SESSION_COOKIE_SECURE = False  # Set to True in production with HTTPS
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Lax'
    
    # Storage: 'sql' uses the database above, 'json' a single local file
    STORAGE_BACKEND = os.environ.get('STORAGE_BACKEND') or 'sql'
    LOCAL_STORE_PATH = os.environ.get('LOCAL_STORE_PATH') or os.path.join(
        os.path.dirname(os.path.abspath(__file__)), 'instance', 'gsm_store.json')
    
    # Ledger policies
    BALANCE_POLICY = os.environ.get('BALANCE_POLICY') or 'recompute'  # recompute, snapshot
    ID_ALLOCATION = os.environ.get('ID_ALLOCATION') or 'counter'  # counter, count
    
    # Access control
    ALLOW_SELF_REGISTERED_ADMIN = _flag('ALLOW_SELF_REGISTERED_ADMIN', True)
    INITIAL_ADMIN_USERNAME = os.environ.get('INITIAL_ADMIN_USERNAME') or 'admin'
    INITIAL_ADMIN_PASSWORD = os.environ.get('INITIAL_ADMIN_PASSWORD') or 'admin123'
    
    # Application defaults
    DEFAULT_SCHEME_PRICES = {'KHSS': 1000, 'DSS': 2000, 'Finance': 5000}
    DEFAULT_LANGUAGE = 'en'
    DEFAULT_CURRENCY_SYMBOL = '₹'
    DEFAULT_APP_NAME = 'GSM Schemes'
    NOTIFICATION_TIMEOUT_MS = 3000
    ITEMS_PER_PAGE = 25
    
class DevelopmentConfig(Config):
    """Development configuration"""
    DEBUG = True
    SQLALCHEMY_ECHO = False

class ProductionConfig(Config):
    """Production configuration"""
    DEBUG = False
    TESTING = False
    SESSION_COOKIE_SECURE = True
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Strict'
    ALLOW_SELF_REGISTERED_ADMIN = _flag('ALLOW_SELF_REGISTERED_ADMIN', False)
    
    # Security headers
    WTF_CSRF_ENABLED = True
    WTF_CSRF_TIME_LIMIT = 3600
    
    SQLALCHEMY_ENGINE_OPTIONS = {
        'pool_pre_ping': True,
        'pool_recycle': 300,
        'pool_size': 10,
        'max_overflow': 20
    }

class TestingConfig(Config):
    """Testing configuration"""
    TESTING = True
    WTF_CSRF_ENABLED = False
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    SQLALCHEMY_ENGINE_OPTIONS = {}
    STORAGE_BACKEND = 'sql'
    BALANCE_POLICY = 'recompute'
    ID_ALLOCATION = 'counter'
    ALLOW_SELF_REGISTERED_ADMIN = True

config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}
