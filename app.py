import logging
import os

from flask import Flask, request

from routes.pokemon import bp as pokemon_bp
from services import pokemon as services
from services.core import (
    CORS_ALLOW_CREDENTIALS,
    CORS_ALLOW_HEADERS,
    CORS_ALLOW_METHODS,
    CORS_ALLOW_ORIGIN,
    LOG_LEVEL,
)

logging.basicConfig(
    level=LOG_LEVEL,
    format='%(asctime)s %(levelname)s [%(threadName)s] %(name)s: %(message)s',
)

app = Flask(__name__)
app.json.sort_keys = False
app.json.ensure_ascii = False

app.register_blueprint(pokemon_bp)


@app.after_request
def _cors_headers(response):
    origin = CORS_ALLOW_ORIGIN
    if origin == 'reflect':
        origin = request.headers.get('Origin') or '*'
    response.headers['Access-Control-Allow-Origin'] = origin
    response.headers['Access-Control-Allow-Methods'] = CORS_ALLOW_METHODS
    response.headers['Access-Control-Allow-Headers'] = CORS_ALLOW_HEADERS
    if CORS_ALLOW_CREDENTIALS:
        response.headers['Access-Control-Allow-Credentials'] = 'true'
    return response


# Schedule the name index build once on the first incoming request
@app.before_request
def _schedule_warmup():
    if not services.WARMUP_SCHEDULED:
        services.warm_up_index()


if __name__ == '__main__':
    port = int(os.environ.get('PORT', 5000))
    app.run(host='0.0.0.0', port=port, debug=os.environ.get('FLASK_DEBUG') == '1')
