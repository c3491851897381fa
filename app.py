"""Run the songclash API locally."""

import os

from flask import jsonify

from songclash import create_app

app = create_app()


@app.route("/health")
def health_check():
    """Liveness check."""
    return jsonify({"status": "ok"}), 200


if __name__ == "__main__":
    port = int(os.environ.get("PORT") or 8080)
    app.run(debug=os.environ.get("FLASK_DEBUG") == "1", host="0.0.0.0", port=port)  # nosec
