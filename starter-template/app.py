"""
Loomline Starter App
====================

A ready-to-run Flask application serving the catalog API.

Run with:
    python app.py

Visit:
    http://localhost:5000/api/products      - Catalog listing
    http://localhost:5000/api/categories    - Category counts
"""

from flask import Flask, jsonify
from loomline import Loomline, Config

# Create Flask app
app = Flask(__name__)

# Initialize Loomline - this registers all modules automatically
loomline = Loomline(app)


@app.route('/health')
def health():
    return jsonify({'status': 'ok', 'modules': loomline.get_registered_modules()})


if __name__ == '__main__':
    print("\n" + "=" * 60)
    print("Loomline Starter App")
    print("=" * 60)
    print(f"Catalog API:     http://localhost:{Config.port}/api/products")
    print(f"Admin API:       http://localhost:{Config.port}/admin/products")
    print("Seed data:       flask --app app.py seed-catalog")
    print("=" * 60 + "\n")

    app.run(host='0.0.0.0', port=Config.port, debug=True)
