"""
GreenSpark Backend - Gamified Environmental Education Platform
Flask API over Firestore, deployable as a Firebase Cloud Function
"""

import os
import time
import logging

from flask import Flask, g, jsonify, request, send_from_directory
from flask_cors import CORS

from greenspark.config import Config, DEFAULT_JWT_SECRET
from greenspark.routes.admin import admin_bp
from greenspark.routes.assignments import assignments_bp
from greenspark.routes.auth import auth_bp
from greenspark.routes.challenges import challenges_bp
from greenspark.routes.games import games_bp
from greenspark.routes.leaderboard import leaderboard_bp
from greenspark.routes.learn import learn_bp
from greenspark.routes.media import media_bp
from greenspark.routes.teacher import teacher_bp
from greenspark.services.assignment_service import AssignmentService
from greenspark.services.auth_service import AuthService
from greenspark.services.challenge_service import ChallengeService
from greenspark.services.game_service import GameService
from greenspark.services.leaderboard_service import LeaderboardService
from greenspark.services.media_service import MediaService
from greenspark.services.quiz_service import QuizService
from greenspark.services.user_service import UserService
from greenspark.utils.error_handler import log_api_call
from greenspark.utils.firestore_utils import init_firestore

__version__ = '1.0.0'

logger = logging.getLogger(__name__)

BLUEPRINTS = (
    auth_bp,
    challenges_bp,
    leaderboard_bp,
    teacher_bp,
    admin_bp,
    assignments_bp,
    learn_bp,
    media_bp,
    games_bp,
)


def create_app(config_overrides=None, db=None):
    """
    Build the Flask app. Tests pass config overrides and an in-memory db.
    """
    app = Flask(__name__)
    app.config.from_object(Config)
    if config_overrides:
        app.config.update(config_overrides)

    # Configure logging
    logging.basicConfig(
        level=app.config['LOG_LEVEL'],
        format='%(asctime)s %(levelname)s %(name)s: %(message)s'
    )

    if app.config['JWT_SECRET'] == DEFAULT_JWT_SECRET and not app.config.get('TESTING'):
        logger.warning("JWT_SECRET is not set, using the development secret")

    CORS(app, origins=app.config['ALLOWED_ORIGINS'])

    os.makedirs(app.config['UPLOAD_FOLDER'], exist_ok=True)

    # Initialize Firestore client
    if db is None:
        db = init_firestore(app.config)

    # Initialize services
    app.extensions['greenspark'] = {
        'auth': AuthService(
            db,
            secret=app.config['JWT_SECRET'],
            algorithm=app.config['JWT_ALGORITHM'],
            token_ttl_days=app.config['TOKEN_TTL_DAYS']
        ),
        'users': UserService(db),
        'challenges': ChallengeService(db),
        'leaderboard': LeaderboardService(db),
        'assignments': AssignmentService(db),
        'quizzes': QuizService(db),
        'games': GameService(db),
        'media': MediaService(db, app.config['UPLOAD_FOLDER']),
    }

    api_prefix = app.config['API_PREFIX'].rstrip('/')
    for blueprint in BLUEPRINTS:
        app.register_blueprint(blueprint, url_prefix=f"{api_prefix}{blueprint.url_prefix}")

    _register_hooks(app)
    _register_core_routes(app)
    _register_error_handlers(app)

    logger.info(f"GreenSpark API ready ({app.config['ENVIRONMENT']}) under {api_prefix}")
    return app


def _register_hooks(app):
    @app.before_request
    def start_timer():
        g.request_started = time.perf_counter()

    @app.after_request
    def log_request(response):
        started = g.get('request_started')
        duration = round((time.perf_counter() - started) * 1000, 2) if started else None
        user = getattr(request, 'current_user', None)
        log_api_call(
            request.path,
            user_id=user.get('id') if user else None,
            duration=duration,
            status_code=response.status_code
        )
        return response


def _register_core_routes(app):
    # Health check endpoint
    @app.route('/health', methods=['GET'])
    def health_check():
        return jsonify({
            'status': 'healthy',
            'service': 'greenspark-backend',
            'version': app.config['API_VERSION']
        })

    @app.route('/uploads/<path:filename>', methods=['GET'])
    def uploaded_file(filename):
        """Serve stored media uploads"""
        return send_from_directory(app.config['UPLOAD_FOLDER'], filename)


def _register_error_handlers(app):
    @app.errorhandler(404)
    def not_found(error):
        return jsonify({'error': 'Endpoint not found', 'status': 'error'}), 404

    @app.errorhandler(405)
    def method_not_allowed(error):
        return jsonify({'error': 'Method not allowed', 'status': 'error'}), 405

    @app.errorhandler(500)
    def internal_error(error):
        logger.error(f"Internal server error: {str(error)}")
        return jsonify({'error': 'Internal server error', 'status': 'error'}), 500
