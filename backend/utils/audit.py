from sqlalchemy.orm import Session
from models.log import Log

# Persists an audit entry in its own commit; call only after the audited change is committed
def write_log(db: Session, *, customer_id, action, resource, status="SUCCESS", meta=None):
    entry = Log(customer_id=customer_id, action=action, resource=resource, status=status, meta=meta or {})
    db.add(entry)
    db.commit()
