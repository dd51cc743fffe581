#!/usr/bin/env python3
"""Mirror host -- Web mode.

Serves the mirror page built by the orchestrator: every started module
is rendered into its screen region, the injected stylesheets go in the
head and the injected scripts at the end of the body. Notifications
stream to the browser over SSE.

Routes:
    /                             rendered page
    /env                          environment variables used by the loader
    /api/modules                  module descriptors and lifecycle state
    /api/modules/<id>/<action>    POST hide/show a module
    /api/notifications            POST broadcast a notification
    /api/notifications/stream     SSE stream of notifications
"""

import json
import logging
import os
from typing import Any, Dict

from flask import Flask, Response, abort, jsonify, render_template, request, send_from_directory

from config import POSITIONS, ROOT_DIR
from core.host import MirrorShell, get_env_vars
from core.orchestrator import Orchestrator

logger = logging.getLogger(__name__)

STATIC_DIRS = {"css", "vendor", "translations", "modules", "fonts"}
BLOCKED_EXTENSIONS = {".py", ".pyc"}


def create_app(orchestrator: Orchestrator, shell: MirrorShell, config: Dict[str, Any]):
    """Create and configure the Flask application."""
    app = Flask(
        __name__,
        template_folder="web/templates",
        static_folder=None,
    )
    bus = orchestrator.bus
    base_path = config.get("base_path", "/")
    static_dirs = STATIC_DIRS | {str(config.get("modules_dir", "modules")).split("/")[0]}

    # ─── Routes: UI ───

    @app.route("/")
    def index():
        regions: Dict[str, list] = {}
        overlay = []
        for module in orchestrator.modules:
            try:
                dom = module.get_dom()
            except Exception as exc:
                logger.error("Module %s failed to render: %s", module.name, exc)
                dom = ""
            entry = {"module": module, "dom": dom}
            if module.data and module.data.position:
                regions.setdefault(module.data.position, []).append(entry)
            elif entry["dom"]:
                # Headless modules (alert) draw over everything when they have content
                overlay.append(entry)
        return render_template(
            "index.html",
            language=config.get("language", "en"),
            base_path=base_path,
            positions=POSITIONS,
            regions=regions,
            overlay=overlay,
            head=orchestrator.document.head_html(),
            scripts=orchestrator.document.scripts_html(),
        )

    @app.route("/env")
    def env():
        return jsonify(get_env_vars(config))

    # ─── Routes: Modules ───

    @app.route("/api/modules")
    def modules():
        return jsonify({
            "started": shell.started,
            "modules": [m.info() for m in orchestrator.modules],
        })

    @app.route("/api/modules/<identifier>/<action>", methods=["POST"])
    def module_action(identifier, action):
        module = shell.get_module(identifier)
        if module is None:
            return jsonify({"error": f"Unknown module: {identifier}"}), 404
        if action == "hide":
            module.hide()
        elif action == "show":
            module.show()
        else:
            return jsonify({"error": f"Unknown action: {action}"}), 400
        return jsonify(module.info())

    # ─── Routes: Notifications ───

    @app.route("/api/notifications", methods=["POST"])
    def send_notification():
        body = request.get_json(silent=True) or {}
        notification = body.get("notification")
        if not notification or not isinstance(notification, str):
            return jsonify({"error": "notification is required"}), 400
        bus.publish(notification, body.get("payload"), sender=body.get("sender", "api"))
        return jsonify({"ok": True})

    @app.route("/api/notifications/stream")
    def notification_stream():
        """SSE endpoint streaming bus notifications."""
        def generate():
            for notification, payload, sender in bus.sse_stream():
                if notification == "keepalive":
                    yield ": keepalive\n\n"
                    continue
                try:
                    data = json.dumps({"payload": payload, "sender": sender}, default=str)
                    yield f"event: {notification}\ndata: {data}\n\n"
                except (TypeError, ValueError) as exc:
                    logger.debug("SSE serialize error for %s: %s", notification, exc)

        return Response(
            generate(),
            mimetype="text/event-stream",
            headers={
                "Cache-Control": "no-cache",
                "X-Accel-Buffering": "no",
                "Connection": "keep-alive",
            },
        )

    # ─── Routes: Static resources ───

    @app.route("/<path:filename>")
    def resource(filename):
        top = filename.split("/", 1)[0]
        if top not in static_dirs or os.path.splitext(filename)[1] in BLOCKED_EXTENSIONS:
            abort(404)
        return send_from_directory(ROOT_DIR, filename)

    return app
