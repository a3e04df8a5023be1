"""Flask routes for the Synapomorphia settings tab, panel, and JSON API."""

from functools import wraps

from flask import Blueprint, current_app, jsonify, redirect, render_template_string, request, url_for

from synapomorphia.settings import FIELD_NAMES, HEADER_OPTIONS, SETTING_FIELDS, UnknownSetting
from synapomorphia.views import TREE_QUIZ_VIEW
from synapomorphia.workspace import Menu

main_bp = Blueprint("main", __name__)
api_bp = Blueprint("api", __name__)


SETTINGS_HTML = """
<!doctype html>
<html lang="en">
<head><meta charset="utf-8"><title>Synapomorphia Settings</title></head>
<body>
  <h2>Synapomorphia Settings</h2>
  {% if error %}<p class="error">{{ error }}</p>{% endif %}
  <form method="post">
    {% for s in fields %}
    <div class="setting-item">
      <label for="{{ s.field }}"><strong>{{ s.name }}</strong></label>
      <div class="setting-item-description">{{ s.desc }}</div>
      {% if s.kind == "header" %}
      <select id="{{ s.field }}" name="{{ s.field }}">
        {% for value, label in header_options %}
        <option value="{{ value }}"{% if value == settings[s.field]|string %} selected{% endif %}>{{ label }}</option>
        {% endfor %}
      </select>
      {% else %}
      <input id="{{ s.field }}" name="{{ s.field }}" value="{{ settings[s.field] }}">
      {% endif %}
    </div>
    {% endfor %}
    <button type="submit">Save</button>
  </form>
</body>
</html>
"""


def _plugin():
    return current_app.extensions["synapomorphia"]


def _lock():
    return current_app.extensions["synapomorphia_lock"]


def serialized(view):
    """Run *view* while holding the plugin lock; the plugin is single-threaded."""
    @wraps(view)
    def wrapper(*args, **kwargs):
        with _lock():
            return view(*args, **kwargs)
    return wrapper


def _setting_tab():
    return _plugin().events.setting_tabs[0]


def _apply_changes(data: dict) -> list[str]:
    """Check every field, then apply them through the settings tab in one save."""
    for field in data:
        if field not in FIELD_NAMES:
            raise UnknownSetting(field)
    return _setting_tab().apply(data)


# ─── Page Routes ─────────────────────────────────────────────────────────

@main_bp.route("/", methods=["GET", "POST"])
@serialized
def settings_page():
    error = None
    if request.method == "POST":
        try:
            _apply_changes(request.form.to_dict())
        except (UnknownSetting, ValueError) as exc:
            error = str(exc)
        else:
            return redirect(url_for("main.settings_page"))
    return render_template_string(
        SETTINGS_HTML,
        fields=SETTING_FIELDS,
        header_options=HEADER_OPTIONS,
        settings=_plugin().settings.to_dict(),
        error=error,
    ), (400 if error else 200)


@main_bp.route("/view/tree-quiz")
@serialized
def tree_quiz_page():
    plugin = _plugin()
    leaf = plugin.activate_tree_quiz_view()
    if leaf is None or leaf.view is None:
        return "No pane available for the Tree Quiz view.", 409
    return leaf.view.content_el.render()


# ─── Settings API ────────────────────────────────────────────────────────

@api_bp.route("/settings", methods=["GET"])
@serialized
def get_settings():
    return jsonify(_plugin().settings.to_dict())


@api_bp.route("/settings", methods=["PATCH", "PUT"])
@serialized
def update_settings():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({"error": "Expected a JSON object"}), 400
    try:
        changed = _apply_changes(data)
    except UnknownSetting as exc:
        return jsonify({"error": f"Unknown setting {exc.args[0]!r}"}), 400
    except ValueError as exc:
        return jsonify({"error": str(exc)}), 400
    return jsonify({"settings": _plugin().settings.to_dict(), "changed": changed})


# ─── Commands & workspace API ────────────────────────────────────────────

@api_bp.route("/commands", methods=["GET"])
@serialized
def list_commands():
    events = _plugin().events
    return jsonify([
        {"id": c.id, "name": c.name, "available": events.is_command_available(c.id)}
        for c in events.commands.values()
    ])


@api_bp.route("/commands/<command_id>", methods=["POST"])
@serialized
def run_command(command_id):
    events = _plugin().events
    if command_id not in events.commands:
        return jsonify({"error": f"Unknown command {command_id!r}"}), 404
    if not events.execute_command(command_id):
        return jsonify({"error": "Command not available"}), 409
    workspace = _plugin().workspace
    return jsonify({
        "executed": command_id,
        "modals": len(workspace.modals),
        "editor": workspace.active_editor.text if workspace.active_editor else None,
    })


@api_bp.route("/view/activate", methods=["POST"])
@serialized
def activate_view():
    plugin = _plugin()
    leaf = plugin.activate_tree_quiz_view()
    return jsonify({
        "opened": leaf is not None,
        "leaf": leaf.id if leaf else None,
        "count": len(plugin.workspace.get_leaves_of_type(TREE_QUIZ_VIEW)),
    })


@api_bp.route("/file-menu", methods=["POST"])
@serialized
def file_menu():
    """Right-click a vault folder and pick "Generate Phylogenetic Tree".

    Expects JSON body: {"folder": "vault/relative/path"}
    """
    plugin = _plugin()
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({"error": "Expected a JSON object"}), 400
    folder = data.get("folder")
    if not isinstance(folder, str) or not folder:
        return jsonify({"error": "folder is required"}), 400
    vault = plugin.vm.vault_path.resolve()
    if not plugin.vm.resolve(folder).resolve().is_relative_to(vault):
        return jsonify({"error": "folder must be inside the vault"}), 400

    menu = Menu()
    plugin.events.trigger("file-menu", menu, folder)
    item = menu.item("Generate Phylogenetic Tree")
    if item is None:
        return jsonify({"error": f"{folder!r} is not a folder"}), 400

    report = item.click()
    if report is None:
        return jsonify({"error": plugin.workspace.notices[-1]}), 400
    return jsonify({
        "report": str(report),
        "tree": plugin.last_tree.to_dict() if plugin.last_tree else None,
    })
