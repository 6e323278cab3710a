"""
Secrets blueprint: list everyone's secrets and submit your own.

Both views require a resolved session; anonymous requests are redirected to
the login page by Flask-Login.
"""

import logging

from flask import Blueprint, render_template, request, redirect, url_for, flash
from flask_login import login_required, current_user
from marshmallow import ValidationError

from keeper.exceptions import UserNotFound
from keeper.manage.users import update_secret_text
from keeper.queries.users import get_submitted_secrets
from keeper.schemas import SecretSubmissionSchema
from webapp.auth import sessions
from webapp.extensions import db

logger = logging.getLogger(__name__)

bp = Blueprint('secrets', __name__)


@bp.route('/secrets')
@login_required
def secrets():
    """Show every stored secret, without authorship."""
    return render_template('secrets.html', secrets=get_submitted_secrets(db.session))


@bp.route('/submit', methods=['GET', 'POST'])
@login_required
def submit():
    """
    Secret submission page and handler.

    GET: Display submission form
    POST: Replace the current user's secret
    """
    if request.method == 'GET':
        return render_template('submit.html', current_secret=current_user.secret_text)

    try:
        data = SecretSubmissionSchema().load(request.form.to_dict())
    except ValidationError:
        flash('Your secret cannot be empty.', 'error')
        return render_template('submit.html', current_secret=current_user.secret_text), 400

    try:
        update_secret_text(db.session, current_user.user_id, data['secret'])
    except UserNotFound:
        # The account vanished after the session resolved it
        logger.warning(f"Secret submission for missing user {current_user.user_id}; ending session")
        sessions.end()
        flash('Your account could not be found. Please log in again.', 'error')
        return redirect(url_for('auth.login'))

    return redirect(url_for('secrets.secrets'))
