import logging
from functools import wraps

from cachelib import FileSystemCache
from flask import Blueprint, Flask, current_app, jsonify, request, session
from flask_session import Session

from config import Config
from errors import InventoryError
from inventory import format_money
from state import AppState
from storage import DatabaseStorage, db

bp = Blueprint('inventory', __name__)

# ------------------------------------------------------------
# Configuration
# ------------------------------------------------------------

def create_app(overrides=None):
    app = Flask(__name__)
    app.config.from_object(Config)
    if overrides:
        app.config.update(overrides)

    logging.basicConfig(
        level=app.config['LOG_LEVEL'],
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )

    # server-side session store; every start begins logged out
    cache = app.config.get('SESSION_CACHELIB')
    if cache is None:
        cache = FileSystemCache(app.config['SESSION_FILE_DIR'], threshold=500)
        app.config['SESSION_CACHELIB'] = cache
    cache.clear()
    Session(app)

    db.init_app(app) # storage table lives in SQLALCHEMY_DATABASE_URI
    with app.app_context(): # creates the storage table if it doesn't already exist, then loads users and inventory
        db.create_all()
        app.extensions['inventory_state'] = AppState.load(DatabaseStorage())

    app.register_blueprint(bp)
    app.logger.info('Inventory app ready')
    return app


def get_state():
    return current_app.extensions['inventory_state']


def get_form():
    # JSON body or a plain HTML form post
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else request.form


def login_required(f):
    @wraps(f)
    def decorated(*args, **kwargs):
        if not session.get('logged_in'):
            return jsonify({'error': 'Please log in first'}), 401
        return f(*args, **kwargs)

    return decorated


def product_to_dict(product, position):
    data = product.model_dump()
    data['position'] = position
    data['display_price'] = format_money(product.price, current_app.config['CURRENCY_SYMBOL'])
    return data


def product_list():
    return [product_to_dict(p, i) for i, p in enumerate(get_state().inventory.products())]


@bp.app_errorhandler(InventoryError)
def handle_inventory_error(e):
    return jsonify(e.to_dict()), e.status_code


# ------------------------------------------------------------
# Registration, login and logout
# ------------------------------------------------------------

# User Registration, does not log the user in
@bp.route('/register', methods=['POST'])
def register():
    data = get_form()
    get_state().accounts.register(data.get('username'), data.get('password'))
    return jsonify({'message': 'Registration successful. Please log in.'}), 201


# User Login
@bp.route('/login', methods=['POST'])
def login():
    data = get_form()
    user = get_state().accounts.login(data.get('username'), data.get('password'))
    session['logged_in'] = True
    session['username'] = user.username
    return jsonify({'message': 'Login successful!', 'username': user.username})


# Logout
@bp.route('/logout', methods=['POST'])
def logout():
    username = session.get('username')
    session.clear()
    if username:
        current_app.logger.info('User %s logged out', username)
    return jsonify({'message': 'User logged out successfully!'})


@bp.route('/session', methods=['GET'])
def get_session():
    return jsonify({
        'logged_in': bool(session.get('logged_in')),
        'username': session.get('username'),
    })


# ------------------------------------------------------------
# Dashboard and inventory (login required)
# ------------------------------------------------------------

@bp.route('/dashboard', methods=['GET'])
@login_required
def dashboard():
    inventory = get_state().inventory
    total_value = inventory.total_value()
    pending = inventory.pending()
    return jsonify({
        'username': session.get('username'),
        'total_products': inventory.total_products(),
        'total_value': str(total_value),
        'total_value_display': format_money(total_value, current_app.config['CURRENCY_SYMBOL']),
        'products': product_list(),
        'pending_removal': pending.model_dump() if pending else None,
    })


@bp.route('/inventory', methods=['GET'])
@login_required
def get_inventory():
    return jsonify({'products': product_list()})


# Add a product; on a validation error the submitted values come back under 'form'
@bp.route('/inventory', methods=['POST'])
@login_required
def add_product():
    data = get_form()
    product = get_state().inventory.add(
        data.get('name'),
        data.get('description'),
        data.get('category'),
        data.get('price'),
        data.get('quantity'),
    )
    position = get_state().inventory.total_products() - 1
    return jsonify({'message': 'Product added', 'product': product_to_dict(product, position)}), 201


# Opens the confirmation prompt for the product at this position
@bp.route('/inventory/<int(signed=True):index>/remove', methods=['POST'])
@login_required
def request_remove(index):
    product = get_state().inventory.request_remove(index)
    return jsonify({
        'message': 'Are you sure you want to remove this product?',
        'product': product_to_dict(product, index),
    })


@bp.route('/inventory/remove/confirm', methods=['POST'])
@login_required
def confirm_remove():
    product = get_state().inventory.confirm_remove()
    return jsonify({'message': 'Product removed', 'product': product.model_dump()})


@bp.route('/inventory/remove/cancel', methods=['POST'])
@login_required
def cancel_remove():
    get_state().inventory.cancel_remove()
    return jsonify({'message': 'Removal cancelled'})


# ------------------------------------------------------------
# Run the Flask App
# ------------------------------------------------------------

if __name__ == '__main__':
    create_app().run(debug=True)
