# File: physioquiz_app/modules/admin/routes.py
# Admin area: dated question editor (HTML + JSON API), bulk import and analytics.

import io
import random

from flask import abort, current_app, flash, jsonify, redirect, render_template, request, url_for
from flask_login import current_user, login_required
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import SQLAlchemyError

from physioquiz_app.core.error_handlers import AuthorizationError, ValidationError
from physioquiz_app.models import db
from physioquiz_app.schemas import QuestionContent
from physioquiz_app.utils.time_utils import format_date, parse_date, quiz_today, today_str

from . import admin_bp
from .forms import ImportQuestionsForm, QuestionForm
from .logics.question_parser import QuestionParseError, parse_excel, parse_study_text, schedule_questions
from .services.analytics_service import AnalyticsService
from .services.question_admin_service import QuestionAdminService


def _is_api_request():
    return '/api/' in request.path or request.path.endswith('/api')


@admin_bp.before_request
@login_required
def admin_required():
    if not current_user.is_admin:
        if _is_api_request():
            raise AuthorizationError('Administrator access required.')
        abort(403)


def _content_from_form(form: QuestionForm) -> QuestionContent:
    return QuestionContent(
        question=form.question.data or '',
        options=form.filled_options(),
        correct_id=form.correct_id.data or '',
        date=format_date(form.quiz_date.data),
    )


def _content_from_json(payload) -> QuestionContent:
    try:
        return QuestionContent.model_validate(payload or {})
    except PydanticValidationError as e:
        raise ValidationError(
            'Invalid question payload.',
            errors=e.errors(include_url=False, include_context=False, include_input=False),
        )


@admin_bp.route('/')
def index():
    return redirect(url_for('admin.list_questions'))


# --- Question editor (HTML) ---

@admin_bp.route('/questions/')
def list_questions():
    search = request.args.get('q', '').strip()
    questions = QuestionAdminService.list_questions(search)
    folders = QuestionAdminService.group_by_date(questions)
    return render_template(
        'admin/questions.html',
        folders=folders,
        search=search,
        total=len(questions),
        today=today_str(),
    )


@admin_bp.route('/questions/add', methods=['GET', 'POST'])
def add_question():
    form = QuestionForm()
    if request.method == 'GET':
        form.quiz_date.data = quiz_today()
        preset = request.args.get('date')
        if preset:
            form.quiz_date.data = parse_date(preset) or form.quiz_date.data

    if form.validate_on_submit():
        try:
            question = QuestionAdminService.create_question(_content_from_form(form))
            flash(f'Question published for {question.quiz_date}.', 'success')
            return redirect(url_for('admin.list_questions'))
        except PydanticValidationError:
            flash('Check the question and its options.', 'danger')
        except SQLAlchemyError as e:
            db.session.rollback()
            current_app.logger.error(f"Could not save question: {e}", exc_info=True)
            flash('The question could not be saved.', 'danger')

    return render_template('admin/question_form.html', form=form, title='New question', question=None)


@admin_bp.route('/questions/<int:question_id>/edit', methods=['GET', 'POST'])
def edit_question(question_id):
    question = QuestionAdminService.get_question(question_id)
    form = QuestionForm()
    if request.method == 'GET':
        form.load_question(question)

    if form.validate_on_submit():
        try:
            QuestionAdminService.update_question(question_id, _content_from_form(form))
            flash('Question updated.', 'success')
            return redirect(url_for('admin.list_questions'))
        except PydanticValidationError:
            flash('Check the question and its options.', 'danger')
        except SQLAlchemyError as e:
            db.session.rollback()
            current_app.logger.error(f"Could not update question {question_id}: {e}", exc_info=True)
            flash('The question could not be saved.', 'danger')

    return render_template('admin/question_form.html', form=form, title='Edit question', question=question)


@admin_bp.route('/questions/<int:question_id>/delete', methods=['POST'])
def delete_question(question_id):
    try:
        QuestionAdminService.delete_question(question_id)
        flash('Question deleted.', 'success')
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Could not delete question {question_id}: {e}", exc_info=True)
        flash('The question could not be deleted.', 'danger')
    return redirect(url_for('admin.list_questions', q=request.args.get('q') or None))


@admin_bp.route('/questions/<int:question_id>/move', methods=['POST'])
def move_question(question_id):
    try:
        question = QuestionAdminService.reassign_date(question_id, request.form.get('quiz_date'))
        flash(f'Question moved to {question.quiz_date}.', 'success')
    except ValidationError as e:
        flash(e.message, 'danger')
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Could not move question {question_id}: {e}", exc_info=True)
        flash('The question could not be moved.', 'danger')
    return redirect(url_for('admin.list_questions'))


@admin_bp.route('/questions/import', methods=['GET', 'POST'])
def import_questions():
    form = ImportQuestionsForm()
    if request.method == 'GET':
        form.start_date.data = quiz_today()
        form.per_day.data = current_app.config.get('IMPORT_QUESTIONS_PER_DAY', 10)

    if form.validate_on_submit():
        upload = form.questions_file.data
        filename = (upload.filename or '').lower()
        try:
            if filename.endswith('.xlsx'):
                parsed = parse_excel(io.BytesIO(upload.read()))
            else:
                parsed = parse_study_text(upload.read().decode('utf-8', errors='replace'), rng=random.Random())
        except QuestionParseError as e:
            flash(str(e), 'danger')
            return render_template('admin/import.html', form=form)

        if not parsed:
            flash('No valid questions were found in the file.', 'warning')
            return render_template('admin/import.html', form=form)

        per_day = form.per_day.data or current_app.config.get('IMPORT_QUESTIONS_PER_DAY', 10)
        scheduled = schedule_questions(parsed, form.start_date.data, per_day)
        try:
            count = QuestionAdminService.bulk_create(scheduled)
        except SQLAlchemyError as e:
            db.session.rollback()
            current_app.logger.error(f"Question import failed: {e}", exc_info=True)
            flash('The import failed, no questions were saved.', 'danger')
            return render_template('admin/import.html', form=form)

        flash(f'Imported {count} question(s) from {scheduled[0].date} to {scheduled[-1].date}.', 'success')
        return redirect(url_for('admin.list_questions'))

    return render_template('admin/import.html', form=form)


# --- Question editor (JSON API) ---

@admin_bp.route('/questions/api', methods=['GET'])
def api_list_questions():
    search = request.args.get('q', '').strip()
    questions = QuestionAdminService.list_questions(search)
    folders = QuestionAdminService.group_by_date(questions)
    return jsonify({
        'success': True,
        'count': len(questions),
        'folders': [
            {
                'date': folder['date'],
                'count': folder['count'],
                'is_today': folder['is_today'],
                'is_past': folder['is_past'],
                'is_upcoming': folder['is_upcoming'],
                'questions': [q.to_dict() for q in folder['questions']],
            }
            for folder in folders
        ],
    })


@admin_bp.route('/questions/api/<int:question_id>', methods=['GET'])
def api_get_question(question_id):
    question = QuestionAdminService.get_question(question_id)
    return jsonify({'success': True, 'question': question.to_dict()})


@admin_bp.route('/questions/api', methods=['POST'])
def api_create_question():
    content = _content_from_json(request.get_json(silent=True))
    question = QuestionAdminService.create_question(content)
    return jsonify({'success': True, 'question': question.to_dict()}), 201


@admin_bp.route('/questions/api/<int:question_id>', methods=['PUT'])
def api_update_question(question_id):
    content = _content_from_json(request.get_json(silent=True))
    question = QuestionAdminService.update_question(question_id, content)
    return jsonify({'success': True, 'question': question.to_dict()})


@admin_bp.route('/questions/api/<int:question_id>/date', methods=['PATCH'])
def api_reassign_date(question_id):
    payload = request.get_json(silent=True) or {}
    question = QuestionAdminService.reassign_date(question_id, payload.get('date'))
    return jsonify({'success': True, 'question': question.to_dict()})


@admin_bp.route('/questions/api/<int:question_id>', methods=['DELETE'])
def api_delete_question(question_id):
    QuestionAdminService.delete_question(question_id)
    return jsonify({'success': True})


@admin_bp.errorhandler(SQLAlchemyError)
def handle_db_error(error):
    db.session.rollback()
    current_app.logger.error(f"Admin database error: {error}", exc_info=True)
    if _is_api_request():
        return jsonify({'success': False, 'message': 'Database error.', 'code': 'BACKEND_ERROR'}), 503
    flash('Database error, please try again.', 'danger')
    return redirect(url_for('admin.list_questions'))


# --- Analytics ---

@admin_bp.route('/analytics/')
def analytics_dashboard():
    return render_template('admin/analytics.html', dashboard=AnalyticsService.get_dashboard())


@admin_bp.route('/analytics/api/summary')
def analytics_summary_api():
    return jsonify({'success': True, **AnalyticsService.get_dashboard()})
