"""
Authoring session persistence
Keeps the selection ledger, gate pass metadata and the one-time submission
token in the signed Flask session between requests.
"""

import secrets

from flask import session

from gatepass.core.assembler import GatePassAssembler, GatePassMetadata
from gatepass.core.ledger import SelectionLedger

LEDGER_KEY = 'gatepass_ledger'
METADATA_KEY = 'gatepass_metadata'
TOKEN_KEY = 'gatepass_submit_token'


def load_assembler():
    """Rebuild the current user's assembler from the session"""
    ledger = SelectionLedger.from_dict(session.get(LEDGER_KEY))
    metadata = GatePassMetadata.from_dict(session.get(METADATA_KEY))
    return GatePassAssembler(ledger=ledger, metadata=metadata)


def save_assembler(assembler):
    session[LEDGER_KEY] = assembler.ledger.to_dict()
    session[METADATA_KEY] = assembler.metadata.to_dict()


def clear_assembler():
    session.pop(LEDGER_KEY, None)
    session.pop(METADATA_KEY, None)


def issue_submission_token():
    """
    Create the token embedded in the gate pass form

    Each rendered form gets a new token; a submission is only accepted while
    its token is still the current one.
    """
    token = secrets.token_urlsafe(16)
    session[TOKEN_KEY] = token
    return token


def consume_submission_token(token):
    """
    Accept a submission token once

    Returns:
        bool: True if the token was current; it is invalidated either way
    """
    expected = session.pop(TOKEN_KEY, None)
    if not token or not expected:
        return False
    return secrets.compare_digest(str(token), expected)
