# =============================================================================
# core/ - Business Logic Package
# =============================================================================
# This package contains the contact directory's business logic:
# - models/: Pydantic schemas for contacts and response envelopes
# - validation.py: Record validator for create/update/login bodies
# - services/: Contact service, password hasher, token issuer
#
# Services raise the exceptions defined in app/exceptions.py so that the
# HTTP layer can render them without translation.
# =============================================================================
