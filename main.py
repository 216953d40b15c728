"""
GreenSpark Backend - Gamified Environmental Education Platform
Firebase Cloud Functions + Firestore Backend

Main entry point for the Flask API wrapped as Firebase Functions
"""

from firebase_functions import https_fn, options

from greenspark import create_app

app = create_app()

# Firebase Cloud Function wrapper
@https_fn.on_request(
    cors=options.CorsOptions(
        cors_origins=app.config['ALLOWED_ORIGINS'],
        cors_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"]
    )
)
def api(req):
    """Main Cloud Function entry point"""
    with app.request_context(req.environ):
        return app.full_dispatch_request()

# For local development
if __name__ == '__main__':
    app.run(debug=app.config['DEBUG'], host='0.0.0.0', port=app.config['PORT'])
