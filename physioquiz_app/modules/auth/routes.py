# File: physioquiz_app/modules/auth/routes.py
from urllib.parse import urlsplit

from flask import current_app, flash, redirect, render_template, request, url_for
from flask_login import current_user, login_user, logout_user
from sqlalchemy.exc import SQLAlchemyError

from physioquiz_app.models import db

from . import auth_bp
from .forms import LoginForm, RegistrationForm
from .services.auth_service import AuthService


def _safe_next(target):
    """Only same-site relative paths are followed after sign-in."""
    if not target:
        return None
    parts = urlsplit(target)
    if parts.scheme or parts.netloc or not target.startswith('/') or target.startswith('//'):
        return None
    return target


@auth_bp.route('/login', methods=['GET', 'POST'])
def login():
    if current_user.is_authenticated:
        return redirect(url_for('quiz.index'))

    form = LoginForm()
    if form.validate_on_submit():
        user = AuthService.authenticate_user(form.username.data, form.password.data)
        if user is None:
            flash('Invalid username or password.', 'danger')
            return redirect(url_for('auth.login', next=request.args.get('next')))

        # Fires user_logged_in, which pushes this browser's local scores to the ledger.
        login_user(user, remember=form.remember_me.data)
        current_app.logger.info(f"User {user.username} signed in.")
        flash('Signed in.', 'success')
        return redirect(_safe_next(request.args.get('next')) or url_for('quiz.index'))

    return render_template('auth/login.html', form=form)


@auth_bp.route('/logout', methods=['GET', 'POST'])
def logout():
    logout_user()
    return redirect(url_for('quiz.index'))


@auth_bp.route('/register', methods=['GET', 'POST'])
def register():
    if current_user.is_authenticated:
        return redirect(url_for('quiz.index'))

    form = RegistrationForm()
    if form.validate_on_submit():
        try:
            AuthService.register_user(form.username.data, form.password.data, email=form.email.data)
        except SQLAlchemyError as e:
            db.session.rollback()
            current_app.logger.error(f"Registration failed for {form.username.data}: {e}")
            flash('The account could not be created, please try again.', 'danger')
            return render_template('auth/register.html', form=form)
        flash('Account created. You can sign in now.', 'success')
        return redirect(url_for('auth.login'))

    return render_template('auth/register.html', form=form)
