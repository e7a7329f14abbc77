from gateflow.models.base import db, generate_uuid, utcnow, isoformat


class SystemLog(db.Model):
    __tablename__ = 'system_logs'

    id = db.Column(db.String(36), primary_key=True, default=generate_uuid)
    timestamp = db.Column(db.DateTime, nullable=False, default=utcnow, index=True)
    log_type = db.Column(db.String(50), nullable=False)  # e.g. 'admin_action'
    action = db.Column(db.String(255), nullable=False)
    details = db.Column(db.JSON)
    principal_id = db.Column(db.String(36))
    ip_address = db.Column(db.String(45))

    def to_dict(self):
        return {
            'id': self.id,
            'timestamp': isoformat(self.timestamp),
            'log_type': self.log_type,
            'action': self.action,
            'details': self.details,
            'principal_id': self.principal_id,
            'ip_address': self.ip_address
        }
