"""Application factory and initialization"""
import logging
from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_login import LoginManager
from flask_migrate import Migrate
from flask_wtf.csrf import CSRFProtect
from config import config

db = SQLAlchemy()
login_manager = LoginManager()
migrate = Migrate()
csrf = CSRFProtect()

def create_app(config_name='default', **overrides):
    """Create and configure the Flask application"""
    app = Flask(__name__)
    app.config.from_object(config[config_name])
    app.config.update(overrides)
    app.logger.setLevel(getattr(logging, str(app.config.get('LOG_LEVEL', 'INFO')).upper(), logging.INFO))
    
    # Initialize extensions
    db.init_app(app)
    login_manager.init_app(app)
    migrate.init_app(app, db)
    csrf.init_app(app)
    
    # Configure login manager
    login_manager.login_view = 'auth.login'
    login_manager.login_message = 'Please log in to access this page.'
    login_manager.login_message_category = 'info'
    
    # Wire the scheme book to the configured storage backend
    from gsm import models  # noqa: F401  registers tables and the user loader
    from gsm.services import SchemeBook
    from gsm.storage import make_repository
    repository = make_repository(app.config)
    app.extensions['scheme_book'] = SchemeBook.from_config(repository, app.config)
    app.logger.info('Using %s storage backend', app.config.get('STORAGE_BACKEND', 'sql'))
    
    # Register blueprints
    from gsm.auth import auth_bp
    from gsm.main import main_bp
    from gsm.schemes import schemes_bp
    from gsm.settings import settings_bp
    
    app.register_blueprint(auth_bp, url_prefix='/auth')
    app.register_blueprint(main_bp, url_prefix='/')
    app.register_blueprint(schemes_bp, url_prefix='/schemes')
    app.register_blueprint(settings_bp, url_prefix='/settings')
    
    # Context processor for global variables
    @app.context_processor
    def inject_globals():
        from flask import session
        from flask_login import current_user
        from datetime import datetime
        from gsm.i18n import translate
        from gsm.utils.helpers import visible_menu, format_currency
        lang = session.get('lang', app.config.get('DEFAULT_LANGUAGE', 'en'))
        return dict(
            lang=lang,
            t=lambda key: translate(key, lang),
            menu=visible_menu(current_user),
            format_currency=format_currency,
            now=datetime.now,
        )
    
    return app
