# File: physioquiz_app/modules/auth/forms.py
# Login and registration forms.

from flask_wtf import FlaskForm
from wtforms import BooleanField, PasswordField, StringField, SubmitField
from wtforms.validators import DataRequired, EqualTo, Length, Optional, Regexp, ValidationError

from physioquiz_app.models import User


class LoginForm(FlaskForm):
    """
    Sign-in form.
    """
    username = StringField('Username', validators=[DataRequired(message="Enter your username.")])
    password = PasswordField('Password', validators=[DataRequired(message="Enter your password.")])
    remember_me = BooleanField('Remember me')
    submit = SubmitField('Sign in')


class RegistrationForm(FlaskForm):
    """
    Sign-up form. Email is optional.
    """
    username = StringField('Username', validators=[
        DataRequired(message="Choose a username."),
        Length(min=3, max=80, message="Usernames are 3 to 80 characters."),
    ])
    email = StringField('Email', validators=[Optional(), Regexp(r"^[^@\s]+@[^@\s]+\.[^@\s]+$", message="Enter a valid email address.")])
    password = PasswordField('Password', validators=[
        DataRequired(message="Choose a password."),
        Length(min=6, message="Use at least 6 characters."),
    ])
    password2 = PasswordField(
        'Repeat password', validators=[DataRequired(message="Confirm your password."), EqualTo('password', message='Passwords do not match.')])
    submit = SubmitField('Create account')

    def validate_username(self, username):
        user = User.query.filter_by(username=username.data).first()
        if user is not None:
            raise ValidationError('That username is already taken.')

    def validate_email(self, email):
        if not email.data:
            return
        user = User.query.filter_by(email=email.data).first()
        if user is not None:
            raise ValidationError('That email is already registered.')
