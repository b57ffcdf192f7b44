"""
Gate Pass Routes

Generate -> Print workflow for the products selected on the inventory page,
plus the gate pass history with PDF and spreadsheet downloads.
"""

import logging

from flask import Blueprint, current_app, render_template, request, redirect, url_for, flash, Response

from gatepass.exceptions import DuplicateSubmission, StoreError, SubmissionError, ValidationError
from gatepass.services.stores import get_stores
from gatepass.utils.export import export_gate_passes
from gatepass.utils.pdf_utils import generate_gate_pass_pdf
from gatepass.utils.session_state import (
    clear_assembler, consume_submission_token, issue_submission_token, load_assembler, save_assembler
)

logger = logging.getLogger(__name__)

bp = Blueprint('gatepasses', __name__)


@bp.route('/')
def history():
    """Issued gate passes, newest first"""
    _, gate_pass_store = get_stores()
    page = request.args.get('page', 1, type=int)
    per_page = current_app.config.get('ITEMS_PER_PAGE', 50)

    try:
        records = gate_pass_store.list()
    except StoreError as e:
        logger.error(f"Error loading gate passes: {e}")
        flash(f'Error loading gate passes: {e}', 'danger')
        records = []

    page = max(page, 1)
    pages = max((len(records) + per_page - 1) // per_page, 1)
    start = (page - 1) * per_page

    return render_template('gatepasses/history.html',
                           records=records[start:start + per_page],
                           total=len(records),
                           page=page,
                           pages=pages)


@bp.route('/new')
def new():
    """Gate pass form for the current selection"""
    assembler = load_assembler()
    if not assembler.ledger:
        flash('Please select at least one product for transport', 'warning')
        return redirect(url_for('inventory.index'))

    return render_template('gatepasses/new.html',
                           ledger=assembler.ledger,
                           metadata=assembler.metadata,
                           submit_token=issue_submission_token())


@bp.route('/', methods=['POST'])
def create():
    """Generate the gate pass"""
    inventory_store, gate_pass_store = get_stores()
    assembler = load_assembler()

    # Keep what was typed even if the submission is rejected
    assembler.update_metadata(
        destination=request.form.get('destination', ''),
        prepared_by=request.form.get('prepared_by', ''),
        checked_by=request.form.get('checked_by', ''),
        authorized_by=request.form.get('authorized_by', '')
    )
    save_assembler(assembler)

    submit_token = request.form.get('submit_token')
    if not consume_submission_token(submit_token):
        logger.warning("Rejected gate pass form with a stale or missing submission token")
        flash('This gate pass form was already submitted. Check the history before trying again.', 'warning')
        return redirect(url_for('gatepasses.history'))

    try:
        assembler.validate()
    except ValidationError as e:
        flash(str(e), 'warning')
        if not assembler.ledger:
            return redirect(url_for('inventory.index'))
        return redirect(url_for('gatepasses.new'))

    submission = assembler.build_submission()
    # The store refuses a second gate pass for the same form, even when the
    # request replays an older session cookie
    submission['submitToken'] = submit_token

    try:
        record = assembler.commit(
            submission,
            gate_pass_store.create,
            inventory_refresh=inventory_store.list,
            history_refresh=gate_pass_store.list
        )
    except SubmissionError as e:
        if getattr(e.__cause__, 'code', None) == DuplicateSubmission.code:
            clear_assembler()
            flash(f'{e.__cause__}. Check the history before trying again.', 'warning')
            return redirect(url_for('gatepasses.history'))
        flash(str(e), 'danger')
        return redirect(url_for('gatepasses.new'))

    save_assembler(assembler)
    flash(f'Gate pass {record.gate_pass_number} generated successfully!', 'success')
    return redirect(url_for('gatepasses.view', gate_pass_key=record.key))


@bp.route('/export')
def export():
    """Download the gate pass history as Excel or CSV"""
    _, gate_pass_store = get_stores()
    format_type = request.args.get('format', 'excel')

    try:
        records = gate_pass_store.list()
    except StoreError as e:
        flash(f'Error loading gate passes: {e}', 'danger')
        return redirect(url_for('gatepasses.history'))

    if format_type == 'csv':
        output = export_gate_passes(records, 'csv')
        return Response(output.getvalue(), mimetype='text/csv',
                        headers={'Content-Disposition': 'attachment; filename=gate_passes.csv'})

    output = export_gate_passes(records, 'excel')
    return Response(output.getvalue(),
                    mimetype='application/vnd.openxmlformats-officedocument.spreadsheetml.sheet',
                    headers={'Content-Disposition': 'attachment; filename=gate_passes.xlsx'})


def _load_record(gate_pass_key):
    _, gate_pass_store = get_stores()
    return gate_pass_store.get(gate_pass_key)


@bp.route('/<gate_pass_key>')
def view(gate_pass_key):
    """Printable gate pass"""
    try:
        record = _load_record(gate_pass_key)
    except StoreError as e:
        flash(str(e), 'danger')
        return redirect(url_for('gatepasses.history'))

    return render_template('gatepasses/view.html', record=record)


@bp.route('/<gate_pass_key>/pdf')
def pdf(gate_pass_key):
    """Gate pass as a PDF download"""
    try:
        record = _load_record(gate_pass_key)
    except StoreError as e:
        flash(str(e), 'danger')
        return redirect(url_for('gatepasses.history'))

    output = generate_gate_pass_pdf(
        record,
        site_name=current_app.config.get('SITE_NAME', 'Vemagiri GIS'),
        organization=current_app.config.get('ORGANIZATION_NAME', 'Power Grid Corporation of India Ltd')
    )
    filename = f"{record.gate_pass_number or 'gate_pass'}.pdf"
    return Response(output.getvalue(), mimetype='application/pdf',
                    headers={'Content-Disposition': f'inline; filename={filename}'})
