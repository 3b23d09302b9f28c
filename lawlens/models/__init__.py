# Models package
# Import every model so SQLAlchemy can resolve string-based relationships
from lawlens.models.question import Question  # noqa: F401
from lawlens.models.payment import Payment  # noqa: F401
from lawlens.models.bad_decision import BadDecision  # noqa: F401
