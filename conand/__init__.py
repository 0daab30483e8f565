"""
CONAND - localized conference site (events, speakers, sponsors, contact form)
"""
from flask import Flask
from flask_login import LoginManager
import os
from pathlib import Path

# Initialize Flask-Login
login_manager = LoginManager()
login_manager.login_view = 'admin.login'
login_manager.login_message = 'Please log in to access the admin panel.'


def create_app():
    """Create and configure the Flask application"""
    app = Flask(__name__, static_url_path='/img', static_folder='static/img')

    instance_path = Path(app.instance_path)

    # Configuration
    app.config['SECRET_KEY'] = os.environ.get('SECRET_KEY', 'dev-secret-key-change-in-production')
    app.config['CONTENT_FILE'] = os.environ.get('CONTENT_FILE', str(instance_path / 'content.json'))
    app.config['ADMIN_CONFIG_FILE'] = os.environ.get('ADMIN_CONFIG_FILE', str(instance_path / 'admin_config.json'))
    app.config['SITE_NAME'] = os.environ.get('SITE_NAME', 'CONAND')
    app.config['SITE_URL'] = os.environ.get('SITE_URL', 'http://localhost:3000')
    # Contact relay; reCAPTCHA is skipped when no secret is set
    app.config['RECAPTCHA_SECRET_KEY'] = os.environ.get('RECAPTCHA_SECRET_KEY', '')
    app.config['RECAPTCHA_SITE_KEY'] = os.environ.get('RECAPTCHA_SITE_KEY', '')
    app.config['MAILJET_API_KEY'] = os.environ.get('MAILJET_API_KEY', '')
    app.config['MAILJET_API_SECRET'] = os.environ.get('MAILJET_API_SECRET', '')
    app.config['MAILJET_FROM_EMAIL'] = os.environ.get('MAILJET_FROM_EMAIL', 'noreply@devs0.ad')
    app.config['CONTACT_EMAIL'] = os.environ.get('CONTACT_EMAIL', 'info@conand.ad')
    app.config['OUTBOUND_TIMEOUT'] = float(os.environ.get('OUTBOUND_TIMEOUT', '10'))

    # Locale prefixes are stripped before routing; ProxyFix stays outermost
    # so it sees the request as nginx sent it.
    from werkzeug.middleware.proxy_fix import ProxyFix
    from conand.middleware.locale import LocaleMiddleware
    app.wsgi_app = ProxyFix(
        LocaleMiddleware(app.wsgi_app),
        x_for=1,
        x_proto=1,
        x_host=1,
        x_port=1,
        x_prefix=1
    )

    # Initialize Flask-Login
    login_manager.init_app(app)

    # Register blueprints
    from conand.features.pages.blueprint import bp as pages_bp
    from conand.features.contact.blueprint import bp as contact_bp
    from conand.features.admin.blueprint import bp as admin_bp
    app.register_blueprint(pages_bp)    # /, /about, /gallery, /ev/<year>/<slug>
    app.register_blueprint(contact_bp)  # /api/contact
    app.register_blueprint(admin_bp)    # /admin/

    # Template helpers
    from conand.utils.content import t
    from conand.utils.locales import locale_path
    from conand.features.pages.services.media import media_url
    app.jinja_env.globals.update(t=t, locale_path=locale_path, media_url=media_url)

    # CLI
    from conand.utils.seed import seed_content_command
    from conand.features.admin.cli import create_user_command
    app.cli.add_command(seed_content_command)
    app.cli.add_command(create_user_command)

    from conand.models.user import User

    @login_manager.user_loader
    def load_user(user_id):
        """Load user by user_id (the username)"""
        if not user_id:
            return None
        return User.get_by_username(str(user_id))

    @login_manager.unauthorized_handler
    def unauthorized():
        """Handle unauthorized access - return JSON for API routes, redirect for pages"""
        from flask import request, jsonify, redirect, url_for
        if request.path.startswith('/admin/api/') or request.accept_mimetypes.best_match(['application/json', 'text/html']) == 'application/json':
            return jsonify({
                'success': False,
                'error': 'Authentication required',
                'login_required': True
            }), 401
        return redirect(url_for('admin.login'))

    @app.errorhandler(404)
    def not_found(_e):
        """Localized not-found page; JSON for the API"""
        from flask import request, jsonify, render_template
        from conand.middleware.locale import get_request_locale
        from conand.features.pages.services.view_models import build_layout

        if request.path.startswith('/api/') or request.path.startswith('/admin/api/'):
            return jsonify({'error': 'Not found'}), 404

        locale = get_request_locale()
        layout = build_layout(locale, request.path, None, [], [])
        return render_template('not_found.html', layout=layout, locale=locale), 404

    return app


# Create app instance for WSGI servers (gunicorn, etc.)
# gunicorn loads 'conand:app'
app = create_app()
