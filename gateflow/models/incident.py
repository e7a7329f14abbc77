from gateflow.models.base import db, generate_uuid, utcnow, isoformat
from gateflow.models.enums import Severity, IncidentStatus


class Incident(db.Model):
    __tablename__ = 'incidents'

    id = db.Column(db.String(36), primary_key=True, default=generate_uuid)
    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=False)
    location = db.Column(db.String(200), nullable=False)
    severity = db.Column(db.Enum(Severity, native_enum=False, length=16), nullable=False)
    image_url = db.Column(db.Text)
    anonymous = db.Column(db.Boolean, nullable=False, default=False)
    status = db.Column(db.Enum(IncidentStatus, native_enum=False, length=16), nullable=False,
                       default=IncidentStatus.PENDING, index=True)
    action_taken = db.Column(db.Text)
    reported_by_id = db.Column(db.String(36), db.ForeignKey('principals.id'), nullable=False, index=True)
    resolved_by_id = db.Column(db.String(36), db.ForeignKey('principals.id'))
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    resolved_at = db.Column(db.DateTime)

    reported_by = db.relationship('Principal', foreign_keys=[reported_by_id], lazy='joined')

    def to_dict(self, include_reporter=False):
        data = {
            'id': self.id,
            'title': self.title,
            'description': self.description,
            'location': self.location,
            'severity': self.severity.value,
            'status': self.status.value,
            'anonymous': self.anonymous,
            'actionTaken': self.action_taken,
            'imageUrl': self.image_url,
            'resolvedById': self.resolved_by_id,
            'createdAt': isoformat(self.created_at),
            'resolvedAt': isoformat(self.resolved_at)
        }
        if include_reporter:
            if self.anonymous:
                data['reportedById'] = None
                data['reportedBy'] = None
            else:
                data['reportedById'] = self.reported_by_id
                data['reportedBy'] = {
                    'firstName': self.reported_by.first_name,
                    'lastName': self.reported_by.last_name,
                    'role': self.reported_by.role.value
                }
        else:
            data['reportedById'] = self.reported_by_id
        return data

    def __repr__(self):
        return f'<Incident {self.title} [{self.status.value}]>'
