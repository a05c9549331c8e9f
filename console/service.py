from flask import Flask, render_template, request, redirect, url_for, flash, jsonify
import logging
import os

from console.editor import ConfigEditor
from console.monitor import DashboardPoller
from control.config import API_BASE_URL, POLL_INTERVAL_SECONDS

logger = logging.getLogger(__name__)


def create_app(poller: DashboardPoller = None, editor: ConfigEditor = None, start_poller: bool = True) -> Flask:
    """
    Build the console web app.

    The app owns one DashboardPoller: it is subscribed here and cancelled at
    interpreter exit, so the polling thread never outlives the view.
    """
    app = Flask(__name__)
    app.secret_key = os.getenv("TRAFFICGEN_CONSOLE_SECRET", "trafficgen-console-secret")

    poller = poller or DashboardPoller(api_base_url=API_BASE_URL, poll_interval=POLL_INTERVAL_SECONDS)
    editor = editor or ConfigEditor(api_base_url=poller.api_base_url)
    app.extensions["dashboard_poller"] = poller
    app.extensions["config_editor"] = editor

    if start_poller:
        poller.start()
        poller.close_at_exit()

    @app.route('/')
    def index():
        return render_template('dashboard.html', view=poller.state.render())

    @app.route('/view/api/state')
    def view_state():
        """Dashboard view model (JSON) for in-page refresh."""
        try:
            return jsonify(poller.state.render())
        except Exception as e:
            logger.error(f"Failed to render dashboard state: {e}")
            return jsonify({"error": str(e)}), 500

    @app.route('/config')
    def config_page():
        editor.load()
        if editor.error:
            flash(f"Error loading config: {editor.error}", "danger")
        return render_template('config.html', apps=editor.apps, interfaces=editor.interfaces)

    @app.route('/config/apps', methods=['POST'])
    def config_apps_save():
        domain = request.form.get('domain')
        weight = request.form.get('weight')
        if not domain or weight is None:
            flash("Domain and weight are required", "danger")
            return redirect(url_for('config_page'))
        try:
            weight_value = int(weight)
        except ValueError:
            flash(f"Weight must be a whole number, got {weight!r}", "danger")
            return redirect(url_for('config_page'))
        if editor.save_weight(domain, weight_value):
            flash(f"Weight for {domain} set to {weight_value}", "success")
        else:
            flash(f"Error saving weight: {editor.error}", "danger")
        return redirect(url_for('config_page'))

    @app.route('/config/interfaces', methods=['POST'])
    def config_interfaces_save():
        action = request.form.get('action', 'save')
        editor.interfaces = request.form.getlist('interface')
        # Add/remove only edit the working copy; nothing is written until Save
        if action == 'add':
            editor.add_interface()
            return render_template('config.html', apps=editor.apps, interfaces=editor.interfaces)
        if action.startswith('remove:'):
            try:
                editor.remove_interface(int(action.split(':', 1)[1]))
            except ValueError:
                flash(f"Unknown action {action!r}", "danger")
            return render_template('config.html', apps=editor.apps, interfaces=editor.interfaces)
        if editor.save_interfaces():
            flash(f"Saved {len(editor.interfaces)} interface(s)", "success")
        else:
            flash(f"Error saving interfaces: {editor.error}", "danger")
        return redirect(url_for('config_page'))

    return app
