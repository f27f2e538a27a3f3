# app.py
import logging
import os
import socket
import sys

from flask import Flask, jsonify
from flask_cors import CORS

from config.settings import LOG_LEVEL
from routes.interview_routes import interview_bp
from routes.session_routes import session_bp
from routes.ws_routes import socketio  # also registers socketio handlers

logging.basicConfig(
    level=getattr(logging, LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)

# Initialize Flask app
app = Flask(__name__)
CORS(app)

# Register blueprints
app.register_blueprint(interview_bp)
app.register_blueprint(session_bp)

socketio.init_app(app)


@app.route("/")
def root():
    return jsonify({"ok": True, "service": "voice-interview-agent"})


def _pick_port(default_port: int) -> int:
    base = default_port
    for a in sys.argv[1:]:
        if a.startswith("--port="):
            try:
                base = int(a.split("=", 1)[1])
            except ValueError:
                pass
            break
    else:
        try:
            base = int(os.getenv("PORT") or default_port)
        except ValueError:
            base = default_port
    for p in range(base, base + 20):
        s = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        try:
            s.bind(("0.0.0.0", p))
            return p
        except OSError:
            continue
        finally:
            s.close()
    return base


if __name__ == "__main__":
    port = _pick_port(8000)
    socketio.run(app, host="0.0.0.0", port=port, debug=False, allow_unsafe_werkzeug=True)
