# Flask routes only

from flask import Flask, jsonify, request
import logging
import os

from .session import LaunchError, PlayerSession, UnknownPlayerType, create_session

log = logging.getLogger(__name__)

app = Flask(__name__)

CONTROL_ACTIONS = ("play", "pause", "toggle", "next", "previous")

# ---- Session ------------------------------------------------------------------

_session = None

def get_session() -> PlayerSession:
    # One session per process; built lazily so tests can swap it out
    global _session
    if _session is None:
        _session = create_session()
    return _session

def _startup_discovery():
    session = get_session()
    session.initialize()
    names = ", ".join(session.player_names) or "none"
    log.info("[startup] players running: %s", names)

if os.environ.get("MUSICONTROL_SKIP_STARTUP") != "1":
    _startup_discovery()

def _no_player():
    return jsonify({"ok": False, "error": "no player selected"}), 409

# ---- Routes -------------------------------------------------------------------

@app.route("/players", methods=["GET"])
def players():
    session = get_session()
    if request.args.get("refresh") in ("1", "true", "yes"):
        session.refresh()
    elif not session.players:
        session.initialize()

    selected = session.selected
    return jsonify({
        "ok": True,
        "players": session.player_names,
        "selected": selected.player_name if selected else None,
        "refresh_interval": session.settings.refresh_interval,
        "manual_player_types": session.manual_player_types,
    })

@app.route("/players/refresh", methods=["POST"])
def players_refresh():
    session = get_session()
    session.refresh()
    selected = session.selected
    return jsonify({
        "ok": True,
        "players": session.player_names,
        "selected": selected.player_name if selected else None,
    })

@app.route("/players/select", methods=["POST"])
def players_select():
    body = request.get_json(force=True, silent=True) or {}
    name = body.get("name")
    if not name:
        return jsonify({"ok": False, "error": "missing 'name'"}), 400

    try:
        player = get_session().select(name)
    except KeyError:
        return jsonify({"ok": False, "error": f"player '{name}' is not available"}), 404
    return jsonify({"ok": True, "selected": player.player_name, "volume": player.get_volume()})

@app.route("/players/manual", methods=["POST"])
def players_manual():
    body = request.get_json(force=True, silent=True) or {}
    player_type = body.get("player_type")
    if not player_type:
        return jsonify({"ok": False, "error": "missing 'player_type'"}), 400

    player = get_session().connect_manual(str(player_type))
    return jsonify({"ok": True, "selected": player.player_name, "volume": player.get_volume()})

@app.route("/status", methods=["GET"])
def status():
    player = get_session().selected
    if player is None:
        return _no_player()
    return jsonify({"ok": True, **player.status()})

@app.route("/control", methods=["POST"])
def control():
    """
    Body:
      { "action": "play"|"pause"|"toggle"|"next"|"previous" }
    """
    body = request.get_json(force=True, silent=True) or {}
    action = body.get("action")
    if action not in CONTROL_ACTIONS:
        return jsonify({"ok": False, "error": f"action must be one of {'|'.join(CONTROL_ACTIONS)}"}), 400

    session = get_session()
    player = session.selected
    if player is None:
        return _no_player()

    if action == "toggle":
        session.toggle_playback()
    else:
        getattr(player, action)()
    return jsonify({"ok": True, "action": action, "is_playing": player.is_playing})

@app.route("/volume", methods=["POST"])
def volume():
    body = request.get_json(force=True, silent=True) or {}
    raw = body.get("volume")
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return jsonify({"ok": False, "error": "volume must be a number 0..1"}), 400

    player = get_session().selected
    if player is None:
        return _no_player()

    player.set_volume(value)
    return jsonify({"ok": True, "volume": player.get_volume()})

@app.route("/launch", methods=["POST"])
def launch():
    body = request.get_json(force=True, silent=True) or {}
    player_type = body.get("player")
    if player_type is not None and not isinstance(player_type, str):
        return jsonify({"ok": False, "error": "'player' must be a player name"}), 400

    session = get_session()
    try:
        launched = session.launch(player_type)
    except UnknownPlayerType:
        # only configured or registered player types are ever started
        return jsonify({
            "ok": False,
            "error": f"unknown player '{player_type}'",
            "allowed": session.launchable_types,
        }), 400
    except LaunchError as e:
        return jsonify({"ok": False, "error": str(e)}), 500
    return jsonify({
        "ok": True,
        "launched": launched,
        "detail": "wait a moment for it to start, then refresh or connect manually",
    })

if __name__ == "__main__":
    # local dev runner
    app.run(host="127.0.0.1", port=5002, debug=True)
