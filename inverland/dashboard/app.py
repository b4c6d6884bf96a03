"""
Inverland Dashboard - JSON API for listings, clients, campaigns and users
"""
import logging
from functools import wraps

from flask import Blueprint, Flask, current_app, g, jsonify, request
from pydantic import ValidationError

from inverland.core.config import Settings, settings as default_settings
from inverland.services import InverlandError, PropertyFilters
from inverland.stores import FlaskSessionStore, RemoteStoreError

logger = logging.getLogger(__name__)

api = Blueprint('api', __name__, url_prefix='/api')

# Profile fields a user may change on their own account
SELF_SERVICE_FIELDS = ('name', 'username', 'password')


def get_container():
    return current_app.extensions['inverland']


# ==================== AUTH HELPERS ====================

def login_required(f):
    """Decorator to require login for a route"""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if g.user is None:
            return jsonify({'success': False, 'error': 'Authentication required'}), 401
        return f(*args, **kwargs)
    return decorated_function


def permission_required(permission):
    """Decorator to require a specific permission"""
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            if g.user is None:
                return jsonify({'success': False, 'error': 'Authentication required'}), 401
            if not g.user.has_permission(permission):
                return jsonify({'success': False, 'error': f'Permission denied: {permission}'}), 403
            return f(*args, **kwargs)
        return decorated_function
    return decorator


@api.before_app_request
def load_user():
    """Re-derive the session user from the user collection before each request"""
    g.auth = get_container().auth(FlaskSessionStore())
    g.user = g.auth.refresh()


def request_data() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


# ==================== AUTH ====================

@api.route('/auth/login', methods=['POST'])
def api_login():
    """API: Log in with username and password"""
    data = request_data()
    if not g.auth.login(str(data.get('username', '')), str(data.get('password', ''))):
        return jsonify({'success': False, 'error': 'Usuario o contraseña incorrectos.'}), 401
    return jsonify({'success': True, 'user': g.auth.current_user.to_dict()})


@api.route('/auth/logout', methods=['POST'])
def api_logout():
    """API: End the current session"""
    g.auth.logout()
    return jsonify({'success': True})


@api.route('/auth/me', methods=['GET'])
@login_required
def api_me():
    """API: Current session user"""
    return jsonify({'success': True, 'user': g.user.to_dict(), 'permissions': g.user.get_permissions()})


# ==================== USERS ====================

@api.route('/users', methods=['GET'])
@permission_required('manage_users')
def api_list_users():
    """API: List users"""
    users = get_container().users.all()
    return jsonify({'success': True, 'users': [user.to_public_dict() for user in users]})


@api.route('/users', methods=['POST'])
@permission_required('manage_users')
def api_register_user():
    """API: Register a user"""
    data = request_data()
    if not data.get('username') or not data.get('password') or not data.get('name'):
        return jsonify({'success': False, 'error': 'Por favor, completa todos los campos requeridos.'}), 400

    user = get_container().users.register(data)
    return jsonify({
        'success': True,
        'message': f"Usuario '{user.username}' creado exitosamente.",
        'user': user.to_public_dict()
    }), 201


@api.route('/users/<user_id>', methods=['PUT'])
@login_required
def api_update_user(user_id):
    """API: Edit a user (admins edit anyone, others only themselves)"""
    can_manage = g.user.has_permission('manage_users')
    if not can_manage and g.user.id != user_id:
        return jsonify({'success': False, 'error': 'Permission denied: manage_users'}), 403

    data = request_data()
    data.pop('passwordHash', None)
    data.pop('password_hash', None)
    if not can_manage:
        data = {key: value for key, value in data.items() if key in SELF_SERVICE_FIELDS}
    user = g.auth.patch_user(user_id, data)
    return jsonify({'success': True, 'user': user.to_public_dict()})


@api.route('/users/<user_id>', methods=['DELETE'])
@permission_required('manage_users')
def api_delete_user(user_id):
    """API: Delete a user"""
    if not g.auth.delete_user(user_id):
        return jsonify({'success': False, 'error': f"user '{user_id}' not found"}), 404
    return jsonify({'success': True})


@api.route('/users/dedupe', methods=['POST'])
@permission_required('manage_users')
def api_dedupe_users():
    """API: Remove duplicate user records (one per username is kept)"""
    report = get_container().synchronizer.force_clean_duplicates()
    g.auth.refresh()
    return jsonify({'success': True, **report.to_dict()})


# ==================== PROPERTIES ====================

@api.route('/properties', methods=['GET'])
def api_list_properties():
    """API: Search listings (public)"""
    container = get_container()
    args = request.args.to_dict()
    args['amenities'] = request.args.getlist('amenities')
    filters = PropertyFilters.from_dict(args)
    page = container.properties.search(filters, page=request.args.get('page', 1, type=int))

    serialize = (lambda p: p.to_dict()) if g.user else (lambda p: p.to_public_dict())
    return jsonify({
        'success': True,
        **page.to_dict(serialize),
        'filters': filters.to_dict(),
        'amenities': container.properties.available_amenities(),
    })


@api.route('/properties/<property_id>', methods=['GET'])
def api_get_property(property_id):
    """API: Get one listing (public)"""
    prop = get_container().properties.require(property_id)
    return jsonify({'success': True, 'property': prop.to_dict() if g.user else prop.to_public_dict()})


@api.route('/properties', methods=['POST'])
@permission_required('properties')
def api_create_property():
    """API: Create a listing"""
    prop = get_container().properties.add(request_data())
    return jsonify({'success': True, 'property': prop.to_dict()}), 201


@api.route('/properties/<property_id>', methods=['PUT'])
@permission_required('properties')
def api_update_property(property_id):
    """API: Edit a listing"""
    prop = get_container().properties.patch(property_id, request_data())
    return jsonify({'success': True, 'property': prop.to_dict()})


@api.route('/properties/<property_id>', methods=['DELETE'])
@permission_required('properties')
def api_delete_property(property_id):
    """API: Delete a listing"""
    if not get_container().properties.delete(property_id):
        return jsonify({'success': False, 'error': f"property '{property_id}' not found"}), 404
    return jsonify({'success': True})


@api.route('/properties/<property_id>/activity', methods=['POST'])
@permission_required('properties')
def api_property_activity(property_id):
    """API: Append to a listing's activity log"""
    data = request_data()
    data['authorId'] = g.user.id
    prop = get_container().properties.add_activity(property_id, data)
    return jsonify({'success': True, 'property': prop.to_dict()}), 201


@api.route('/properties/<property_id>/client', methods=['PUT'])
@permission_required('properties')
def api_property_client(property_id):
    """API: Link a client to a listing (null clears it)"""
    container = get_container()
    client_id = request_data().get('clientId')
    if client_id:
        container.clients.require(client_id)
    prop = container.properties.assign_client(property_id, client_id)
    return jsonify({'success': True, 'property': prop.to_dict()})


@api.route('/agents/<agent_id>/properties', methods=['PUT'])
@permission_required('manage_users')
def api_assign_agent_properties(agent_id):
    """API: Set the exact list of properties held by an agent"""
    container = get_container()
    container.users.require(agent_id)
    property_ids = request_data().get('propertyIds') or []
    changed = container.properties.assign_properties_to_agent(agent_id, property_ids)
    return jsonify({
        'success': True,
        'changed': [prop.id for prop in changed],
        'properties': [prop.to_dict() for prop in container.properties.by_agent(agent_id)],
    })


# ==================== CLIENTS ====================

@api.route('/clients', methods=['GET'])
@permission_required('clients')
def api_list_clients():
    """API: List clients"""
    container = get_container()
    clients = container.clients.all()
    agent_id = request.args.get('agentId')
    if agent_id:
        clients = container.clients.by_agent(agent_id)
    return jsonify({'success': True, 'clients': [client.to_dict() for client in clients]})


@api.route('/clients', methods=['POST'])
@permission_required('clients')
def api_create_client():
    """API: Create a client"""
    client = get_container().clients.add(request_data())
    return jsonify({'success': True, 'client': client.to_dict()}), 201


@api.route('/clients/<client_id>', methods=['PUT'])
@permission_required('clients')
def api_update_client(client_id):
    """API: Edit a client"""
    client = get_container().clients.patch(client_id, request_data())
    return jsonify({'success': True, 'client': client.to_dict()})


@api.route('/clients/<client_id>', methods=['DELETE'])
@permission_required('clients')
def api_delete_client(client_id):
    """API: Delete a client"""
    if not get_container().clients.delete(client_id):
        return jsonify({'success': False, 'error': f"client '{client_id}' not found"}), 404
    return jsonify({'success': True})


@api.route('/clients/<client_id>/activity', methods=['POST'])
@permission_required('clients')
def api_client_activity(client_id):
    """API: Append to a client's activity log"""
    data = request_data()
    data['authorId'] = g.user.id
    client = get_container().clients.add_activity(client_id, data)
    return jsonify({'success': True, 'client': client.to_dict()}), 201


# ==================== CAMPAIGNS ====================

@api.route('/campaigns', methods=['GET'])
@permission_required('campaigns')
def api_list_campaigns():
    """API: List campaigns"""
    campaigns = get_container().campaigns.all()
    return jsonify({'success': True, 'campaigns': [campaign.to_dict() for campaign in campaigns]})


@api.route('/campaigns', methods=['POST'])
@permission_required('campaigns')
def api_create_campaign():
    """API: Create a Draft campaign"""
    campaign = get_container().campaigns.add(request_data())
    return jsonify({'success': True, 'campaign': campaign.to_dict()}), 201


@api.route('/campaigns/<campaign_id>', methods=['PUT'])
@permission_required('campaigns')
def api_update_campaign(campaign_id):
    """API: Edit a Draft campaign"""
    container = get_container()
    if container.campaigns.require(campaign_id).is_sent:
        return jsonify({'success': False, 'error': 'La campaña ya fue enviada.'}), 409
    data = request_data()
    for key in ('status', 'sentAt', 'sentToCount'):
        data.pop(key, None)
    campaign = container.campaigns.patch(campaign_id, data)
    return jsonify({'success': True, 'campaign': campaign.to_dict()})


@api.route('/campaigns/<campaign_id>', methods=['DELETE'])
@permission_required('campaigns')
def api_delete_campaign(campaign_id):
    """API: Delete a campaign"""
    if not get_container().campaigns.delete(campaign_id):
        return jsonify({'success': False, 'error': f"campaign '{campaign_id}' not found"}), 404
    return jsonify({'success': True})


@api.route('/campaigns/<campaign_id>/send', methods=['POST'])
@permission_required('campaigns')
def api_send_campaign(campaign_id):
    """API: Send a campaign to its audience"""
    container = get_container()
    if container.campaigns.require(campaign_id).is_sent:
        return jsonify({'success': False, 'error': 'La campaña ya fue enviada.'}), 409

    recipients = container.campaigns.send(campaign_id, container.clients.all())
    return jsonify({
        'success': True,
        'campaign': container.campaigns.require(campaign_id).to_dict(),
        'recipients': [client.to_dict() for client in recipients],
    })


# ==================== ERRORS ====================

def handle_inverland_error(e: InverlandError):
    return jsonify({'success': False, 'error': e.message}), e.status_code


def handle_validation_error(e: ValidationError):
    errors = [{'loc': list(err['loc']), 'msg': err['msg']} for err in e.errors()]
    return jsonify({'success': False, 'error': 'Invalid data', 'errors': errors}), 400


def handle_remote_error(e: RemoteStoreError):
    logger.error(f"Remote store failure: {e.message}")
    return jsonify({'success': False, 'error': 'No se pudo contactar la base de datos remota.'}), 502


# ==================== APP FACTORY ====================

def create_app(settings: Settings = None, container=None) -> Flask:
    """
    Create the dashboard application

    Args:
        settings: Application settings (module settings if not provided)
        container: Pre-built service container (built and loaded if not provided)
    """
    from inverland.container import build_container

    settings = settings or default_settings
    app = Flask(__name__)
    app.config['SECRET_KEY'] = settings.SECRET_KEY
    app.logger.setLevel(settings.LOG_LEVEL.upper())
    app.json.ensure_ascii = False

    app.extensions['inverland'] = container or build_container(settings)

    app.register_blueprint(api)
    app.register_error_handler(InverlandError, handle_inverland_error)
    app.register_error_handler(ValidationError, handle_validation_error)
    app.register_error_handler(RemoteStoreError, handle_remote_error)

    @app.route('/health')
    def health():
        return jsonify({'status': 'ok', 'app': settings.APP_NAME, 'version': settings.APP_VERSION})

    return app
