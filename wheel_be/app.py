from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

from flask import Flask, request, jsonify, g, current_app, has_app_context
import uuid
from flask_cors import CORS
from flask_socketio import SocketIO
from werkzeug.exceptions import HTTPException as WerkzeugHTTPException # Renamed to avoid conflict
from wheel_be.exceptions import AppException
from wheel_be.error_codes import ErrorCodes
import logging
from pythonjsonlogger import jsonlogger
from marshmallow import ValidationError
from http import HTTPStatus
import click # For CLI commands

from .config import Config # Relative import
from .routes.wheel import wheel_bp
from .services.scheduler import ManualScheduler, SocketIOScheduler
from .services.session_registry import SessionRegistry
from .services.websocket_manager import WebSocketManager
from .services.wheel_session import SpinDelays
from .utils.rings import RINGS


# Custom Logging Filter for Request ID
class RequestIdFilter(logging.Filter):
    def filter(self, record):
        # Scheduled wheel resolutions log from background tasks with no app context.
        record.request_id = g.get('request_id', 'N/A') if has_app_context() else 'N/A'
        return True


def create_app(config_class=Config):
    """Application factory pattern."""
    app = Flask(__name__)
    app.config.from_object(config_class)

    # --- CORS Setup ---
    allowed_origins = []

    # Development origins
    if app.debug:
        allowed_origins.extend([
            "http://localhost:5173",
            "http://127.0.0.1:5173",
            "http://localhost:3000",
            "http://127.0.0.1:3000"
        ])

    # Production origins from validated configuration
    if getattr(config_class, 'CORS_ORIGINS_LIST', None):
        allowed_origins.extend(config_class.CORS_ORIGINS_LIST)

    if allowed_origins:
        CORS(app,
             origins=allowed_origins,
             methods=['GET', 'POST', 'DELETE', 'OPTIONS'],
             allow_headers=['Content-Type'],
             max_age=86400)
        app.logger.info(f"CORS configured for origins: {allowed_origins}")
    else:
        app.logger.warning("No CORS origins configured - API will reject cross-origin requests")

    # --- Logging Configuration ---
    if not app.debug:
        handler = logging.StreamHandler()
        formatter = jsonlogger.JsonFormatter(
            '%(asctime)s %(levelname)s %(request_id)s %(name)s %(module)s %(funcName)s %(lineno)d %(message)s'
        )
        handler.setFormatter(formatter)
        handler.addFilter(RequestIdFilter())
        # app.logger ("wheel_be.app") and the service loggers all sit under "wheel_be"
        package_logger = logging.getLogger('wheel_be')
        package_logger.handlers.clear()
        package_logger.addHandler(handler)
        package_logger.setLevel(logging.INFO)
        app.logger.handlers.clear()
    else:
        # Basic logging for debug mode if not already configured
        if not app.logger.handlers:
            logging.basicConfig(level=logging.DEBUG)

    @app.before_request
    def assign_request_id():
        g.request_id = str(uuid.uuid4())

    # --- SocketIO and wheel sessions ---
    socketio = SocketIO(app,
                        cors_allowed_origins=allowed_origins or None,
                        async_mode='threading',
                        logger=app.logger,
                        engineio_logger=app.logger)

    if app.config.get('WHEEL_SCHEDULER') == 'manual':
        scheduler_factory = ManualScheduler
    else:
        def scheduler_factory():
            return SocketIOScheduler(socketio)

    websocket_manager = WebSocketManager(socketio=socketio)
    registry = SessionRegistry(
        scheduler_factory=scheduler_factory,
        starting_balance=app.config['WHEEL_STARTING_BALANCE'],
        delays=SpinDelays(
            spin=app.config['WHEEL_SPIN_DELAY'],
            cascade=app.config['WHEEL_CASCADE_DELAY'],
            settle=app.config['WHEEL_SETTLE_DELAY'],
        ),
        max_sessions=app.config['WHEEL_MAX_SESSIONS'],
        listener=websocket_manager.broadcast_wheel_update,
    )
    websocket_manager.registry = registry
    websocket_manager.init_app(app)

    app.socketio = socketio
    app.wheel_sessions = registry
    app.websocket_manager = websocket_manager

    # --- Error Handlers ---
    @app.errorhandler(ValidationError)
    def handle_validation_error(e):
        request_id = g.get('request_id', 'N/A')
        current_app.logger.warning(
            f"Request ID: {request_id} - Validation error: {e.messages} - Error Code: {ErrorCodes.VALIDATION_ERROR}"
        )
        return jsonify({
            'request_id': request_id,
            'status': False,
            'error_code': ErrorCodes.VALIDATION_ERROR,
            'status_message': 'Input validation failed.',
            'details': {'errors': e.messages},
            'action_button': None
        }), HTTPStatus.UNPROCESSABLE_ENTITY

    @app.errorhandler(WerkzeugHTTPException)
    def handle_werkzeug_http_exception(e):
        request_id = g.get('request_id', 'N/A')
        error_code = ErrorCodes.GENERIC_ERROR # Default
        if e.code == 404:
            error_code = ErrorCodes.NOT_FOUND
        elif e.code == 405:
            error_code = ErrorCodes.METHOD_NOT_ALLOWED
        elif e.code >= 500:
            error_code = ErrorCodes.INTERNAL_SERVER_ERROR

        current_app.logger.warning(
            f"Request ID: {request_id} - Werkzeug HTTPException: {e.code} - {e.name}: {e.description} - Error Code: {error_code}"
        )
        response_data = {
            'request_id': request_id,
            'status': False,
            'error_code': error_code,
            'status_message': e.name,
            'details': {'description': e.description},
            'action_button': None
        }
        response = e.get_response()
        response.data = jsonify(response_data).data
        response.content_type = "application/json"
        return response

    @app.errorhandler(Exception)
    def handle_global_exception(e):
        request_id = g.get('request_id', 'N/A')

        if isinstance(e, AppException):
            log = current_app.logger.error if e.status_code >= 500 else current_app.logger.warning
            log(
                f"Request ID: {request_id} - AppException: {e.error_code} - {e.status_message} - Details: {e.details}",
                exc_info=True if e.status_code >= 500 else False # Log stack trace for server errors
            )
            return jsonify({
                'request_id': request_id,
                'status': False,
                'error_code': e.error_code,
                'status_message': e.status_message,
                'details': e.details,
                'action_button': e.action_button
            }), e.status_code

        if isinstance(e, WerkzeugHTTPException):
            return handle_werkzeug_http_exception(e)

        current_app.logger.critical(
            f"Request ID: {request_id} - Unhandled Critical Exception. Error Code: {ErrorCodes.INTERNAL_SERVER_ERROR}",
            exc_info=True
        )
        return jsonify({
            'request_id': request_id,
            'status': False,
            'error_code': ErrorCodes.INTERNAL_SERVER_ERROR,
            'status_message': 'An unexpected internal server error occurred. Please try again later.',
            'details': {}, # No specific details to expose for unknown errors
            'action_button': None
        }), HTTPStatus.INTERNAL_SERVER_ERROR

    @app.errorhandler(404) # Catches werkzeug.exceptions.NotFound
    def handle_flask_not_found(e):
        request_id = g.get('request_id', 'N/A')
        current_app.logger.warning(
            f"Request ID: {request_id} - HTTP 404 Not Found: {request.url} - Error Code: {ErrorCodes.NOT_FOUND}"
        )
        return jsonify({
            'request_id': request_id,
            'status': False,
            'error_code': ErrorCodes.NOT_FOUND,
            'status_message': 'The requested resource was not found.',
            'details': {'path': request.path},
            'action_button': None
        }), HTTPStatus.NOT_FOUND

    @app.after_request
    def add_security_headers(response):
        response.headers['X-Content-Type-Options'] = 'nosniff'
        response.headers['X-Frame-Options'] = 'DENY'
        return response

    app.register_blueprint(wheel_bp)

    @app.cli.command("wheel-layout")
    @click.option('-r', '--ring', 'ring_name', type=click.Choice([r.value for r in RINGS]), default=None,
                  help='Only show one ring')
    def wheel_layout_command(ring_name):
        """Prints each ring's wedge angle and how many wedges carry each label."""
        for ring, definition in RINGS.items():
            if ring_name and ring.value != ring_name:
                continue
            click.echo(f"{ring.value}: {definition.length} wedges at {definition.wedge_angle:g} degrees")
            for label, count in sorted(definition.label_counts().items(), key=lambda item: (-item[1], item[0])):
                click.echo(f"  {label:>6}  x{count}")

    return app, socketio


app, socketio = create_app() # This line is usually present for Gunicorn/uWSGI or direct run.

if __name__ == '__main__':
    socketio.run(app, host='0.0.0.0', port=5000, debug=app.debug, allow_unsafe_werkzeug=True)
