# File: physioquiz_app/modules/admin/forms.py
# Forms for authoring dated questions and importing question files.

from flask_wtf import FlaskForm
from flask_wtf.file import FileAllowed, FileField, FileRequired
from wtforms import DateField, IntegerField, RadioField, StringField, SubmitField, TextAreaField
from wtforms.validators import DataRequired, NumberRange, Optional, ValidationError

OPTION_FIELDS = (('a', 'option_a'), ('b', 'option_b'), ('c', 'option_c'), ('d', 'option_d'))


class QuestionForm(FlaskForm):
    """
    Create/edit a daily question. Validation is presence-only.
    """
    question = TextAreaField('Question', validators=[DataRequired(message="Question text is required.")])
    quiz_date = DateField('Date', format='%Y-%m-%d', validators=[DataRequired(message="Pick a date.")])
    option_a = StringField('Option A')
    option_b = StringField('Option B')
    option_c = StringField('Option C')
    option_d = StringField('Option D')
    correct_id = RadioField(
        'Correct option',
        choices=[('a', 'A'), ('b', 'B'), ('c', 'C'), ('d', 'D')],
        validators=[DataRequired(message="Mark the correct option.")],
    )
    submit = SubmitField('Publish')

    def filled_options(self):
        options = []
        for option_id, field_name in OPTION_FIELDS:
            text = (getattr(self, field_name).data or '').strip()
            if text:
                options.append({'id': option_id, 'text': text})
        return options

    def validate_option_b(self, field):
        if len(self.filled_options()) < 2:
            raise ValidationError('Fill in at least two answer options.')

    def validate_correct_id(self, field):
        filled = {option['id'] for option in self.filled_options()}
        if field.data and field.data not in filled:
            raise ValidationError('The correct option must have text.')

    def load_question(self, question):
        """Populate the form from an existing DailyQuestion."""
        from physioquiz_app.utils.time_utils import parse_date

        self.question.data = question.question
        self.quiz_date.data = parse_date(question.quiz_date)
        by_id = {option.get('id'): option.get('text') for option in (question.options or [])}
        for option_id, field_name in OPTION_FIELDS:
            getattr(self, field_name).data = by_id.get(option_id, '')
        self.correct_id.data = question.correct_id


class ImportQuestionsForm(FlaskForm):
    """Bulk import of a study text file or an Excel sheet."""
    questions_file = FileField('Questions file', validators=[
        FileRequired(message="Choose a file."),
        FileAllowed(['txt', 'xlsx'], 'Only .txt or .xlsx files are accepted.'),
    ])
    start_date = DateField('First date', format='%Y-%m-%d', validators=[DataRequired(message="Pick a start date.")])
    per_day = IntegerField('Questions per day', default=10, validators=[Optional(), NumberRange(min=1, max=100)])
    submit = SubmitField('Import')
