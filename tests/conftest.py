import os

# must be set before the app module reads its config
os.environ["SYNCMAZE_SQLALCHEMY_DATABASE_URI"] = "sqlite://"

import pytest  # noqa: E402

import app as app_module  # noqa: E402
from models import db  # noqa: E402


@pytest.fixture
def app():
    flask_app = app_module.app
    flask_app.config.update(TESTING=True, MAX_BOARDS=4, RANDOM_BOARDS=2, WALL_PROB=0.2)
    app_module.rng.seed(1234)
    with flask_app.app_context():
        db.drop_all()
        db.create_all()
        yield flask_app
        db.session.remove()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def socket_client(app):
    sc = app_module.socketio.test_client(app)
    sc.get_received()  # drop the welcome message
    yield sc
    if sc.is_connected():
        sc.disconnect()
