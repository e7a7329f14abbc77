from gateflow.models.base import db, generate_uuid, utcnow, isoformat
from gateflow.models.enums import EmergencyType


class SOSBroadcast(db.Model):
    __tablename__ = 'sos_broadcasts'

    id = db.Column(db.String(36), primary_key=True, default=generate_uuid)
    type = db.Column(db.Enum(EmergencyType, native_enum=False, length=24), nullable=False)
    message = db.Column(db.Text, nullable=False)
    triggered_by_id = db.Column(db.String(36), db.ForeignKey('principals.id'), nullable=False)
    is_active = db.Column(db.Boolean, nullable=False, default=True, index=True)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    closed_at = db.Column(db.DateTime)

    triggered_by = db.relationship('Principal', lazy='joined')

    def to_dict(self):
        return {
            'id': self.id,
            'type': self.type.value,
            'message': self.message,
            'triggeredById': self.triggered_by_id,
            'isActive': self.is_active,
            'createdAt': isoformat(self.created_at),
            'closedAt': isoformat(self.closed_at),
            'triggeredBy': {
                'firstName': self.triggered_by.first_name,
                'lastName': self.triggered_by.last_name,
                'role': self.triggered_by.role.value
            }
        }

    def __repr__(self):
        return f'<SOSBroadcast {self.type.value} active={self.is_active}>'
