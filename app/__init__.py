import threading
from pathlib import Path

from flask import Flask
from flask_cors import CORS

from synapomorphia import config as syna_config
from synapomorphia.plugin import SynapomorphiaPlugin
from synapomorphia.workspace import Workspace


def create_app(config_class=None, vault_path=None):
    app = Flask(__name__)

    if config_class:
        app.config.from_object(config_class)
    else:
        from config import Config
        app.config.from_object(Config)

    if not app.config.get("TESTING"):
        syna_config.setup_logging()

    vault = Path(vault_path or app.config.get("SYNAPOMORPHIA_VAULT_PATH", "."))

    # One workspace with a single main pane, like a freshly opened vault
    workspace = Workspace()
    workspace.add_leaf()
    plugin = SynapomorphiaPlugin(workspace, vault_path=vault)
    plugin.onload()
    app.extensions["synapomorphia"] = plugin
    # The dev server is threaded; the plugin only ever runs one call at a time
    lock = threading.Lock()
    app.extensions["synapomorphia_lock"] = lock

    @app.before_request
    def run_due_intervals():
        with lock:
            plugin.events.run_due()

    app.json.ensure_ascii = False
    CORS(app)

    from app.routes import main_bp, api_bp
    app.register_blueprint(main_bp)
    app.register_blueprint(api_bp, url_prefix="/api")

    return app
