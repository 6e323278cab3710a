"""
Authentication blueprint: registration, local login, federated login, logout.
"""

import logging

from flask import (
    Blueprint, render_template, request, redirect, url_for, flash, current_app, session
)
from flask_login import current_user
from marshmallow import ValidationError

from keeper.exceptions import DuplicateIdentifier, InvalidCredentials, ProviderExchangeFailure
from keeper.manage.users import create_user
from keeper.schemas import CredentialsSchema
from webapp.auth import sessions
from webapp.auth.providers import FederatedAuthenticator, FederatedLoginAttempt, LocalAuthenticator
from webapp.extensions import db

logger = logging.getLogger(__name__)

bp = Blueprint('auth', __name__)

# Flask session key holding the in-flight federated login attempt
FEDERATED_ATTEMPT_KEY = 'federated_login'


def credential_scheme():
    """The deployment's credential scheme, configured by create_app()."""
    return current_app.extensions['credential_scheme']


def oauth_client():
    """The configured OAuthProviderClient, or None."""
    return current_app.extensions.get('oauth_client')


def _safe_next(target):
    """Only follow same-site relative redirects."""
    if target and target.startswith('/') and not target.startswith('//') and '\\' not in target:
        return target
    return None


@bp.route('/register', methods=['GET', 'POST'])
def register():
    """
    Registration page and handler.

    GET: Display registration form
    POST: Create a local user and log them in
    """
    if request.method == 'GET':
        return render_template('register.html')

    try:
        data = CredentialsSchema().load(request.form.to_dict())
    except ValidationError as e:
        logger.info(f"Registration rejected: invalid form fields {sorted(e.messages)}")
        flash('Please enter a valid username and a password.', 'error')
        return render_template('register.html'), 400

    try:
        user = create_user(db.session, data['username'], data['password'], credential_scheme())
    except DuplicateIdentifier:
        logger.info(f"Registration rejected: username {data['username']} already taken")
        flash('That username is already registered.', 'error')
        return render_template('register.html', username=data['username']), 409

    sessions.establish(user)
    return redirect(url_for('secrets.secrets'))


@bp.route('/login', methods=['GET', 'POST'])
def login():
    """
    Login page and handler.

    GET: Display login form
    POST: Authenticate local credentials and create session
    """
    if current_user.is_authenticated:
        return redirect(url_for('secrets.secrets'))

    if request.method == 'GET':
        return render_template('login.html', federated_enabled=oauth_client() is not None)

    authenticator = LocalAuthenticator(db.session, credential_scheme())
    try:
        result = authenticator.authenticate(request.form.to_dict())
    except InvalidCredentials as e:
        flash(str(e), 'error')
        return render_template('login.html', federated_enabled=oauth_client() is not None), 401

    sessions.establish(result.user)

    next_page = _safe_next(request.args.get('next'))
    if next_page:
        return redirect(next_page)
    return redirect(url_for('secrets.secrets'))


@bp.route('/logout')
def logout():
    """End the session and return to the landing page."""
    sessions.end()
    return redirect(url_for('index'))


@bp.route('/auth/provider')
def provider_login():
    """Send the browser to the identity provider."""
    client = oauth_client()
    if client is None:
        logger.warning("Federated login requested but no provider is configured")
        flash('Sign-in with an external provider is not available.', 'error')
        return redirect(url_for('auth.login'))

    authenticator = FederatedAuthenticator(db.session, client)
    url = authenticator.begin_federated_login(current_app.config.get('OAUTH_SCOPES'))
    authenticator.attempt.mark_redirected()
    session[FEDERATED_ATTEMPT_KEY] = authenticator.attempt.to_dict()
    return redirect(url)


@bp.route('/auth/provider/callback')
def provider_callback():
    """
    Provider redirect target.

    Success: log the resolved user in and show the secrets.
    Failure: back to the login page; the attempt is not retried.
    """
    client = oauth_client()
    attempt = FederatedLoginAttempt.from_dict(session.pop(FEDERATED_ATTEMPT_KEY, None))

    if client is None:
        flash('Sign-in with an external provider is not available.', 'error')
        return redirect(url_for('auth.login'))

    authenticator = FederatedAuthenticator(db.session, client, attempt=attempt)
    try:
        result = authenticator.authenticate(request.args.to_dict())
    except ProviderExchangeFailure:
        flash('Sign-in with the external provider failed. Please try again.', 'error')
        return redirect(url_for('auth.login'))

    sessions.establish(result.user)
    return redirect(url_for('secrets.secrets'))
