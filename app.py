import os
from flask import Flask, jsonify, request
from config import DevConfig
from models import db
from errors import register_error_handlers
from routes_shop import bp as shop_bp
from routes_admin import bp as admin_bp
from routes_auth import bp as auth_bp
from seed import seed_sample_data

CORS_HEADERS = {
    "Access-Control-Allow-Methods": "GET, POST, PUT, DELETE, OPTIONS",
    "Access-Control-Allow-Headers": "Origin, X-Requested-With, Content-Type, Accept, Authorization",
}


def create_app(config_object=DevConfig):
    app = Flask(__name__)
    app.config.from_object(config_object)
    app.logger.setLevel(app.config["LOG_LEVEL"])

    db.init_app(app)
    register_error_handlers(app)

    app.register_blueprint(shop_bp)
    app.register_blueprint(admin_bp, url_prefix="/api/admin")
    app.register_blueprint(auth_bp, url_prefix="/api/auth")

    @app.before_request
    def preflight():
        # answered before the admin gate runs
        if request.method == "OPTIONS" and request.path.startswith("/api/"):
            return "", 200

    @app.after_request
    def cors(response):
        if request.path.startswith("/api/"):
            response.headers.update(CORS_HEADERS)
            origin = request.headers.get("Origin")
            if origin and origin in app.config["CORS_ORIGINS"]:
                response.headers["Access-Control-Allow-Origin"] = origin
                response.headers["Access-Control-Allow-Credentials"] = "true"
                response.vary.add("Origin")
            else:
                response.headers["Access-Control-Allow-Origin"] = "*"
        return response

    @app.get("/api/health")
    def health():
        return jsonify({"status": "ok"})

    @app.cli.command("seed")
    def seed_command():
        """Load the sample catalog and blog posts into empty tables."""
        products, posts = seed_sample_data()
        print(f"[seed] {products} products, {posts} blog posts added")

    # Create tables at startup
    with app.app_context():
        db.create_all()
        if app.config["SEED_SAMPLE_DATA"]:
            seed_sample_data()

    return app


if __name__ == "__main__":
    create_app().run(host="0.0.0.0", port=int(os.getenv("PORT", "5000")), debug=True)
