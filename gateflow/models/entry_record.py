from gateflow.models.base import db, generate_uuid, utcnow, isoformat
from gateflow.models.enums import EntryType


class EntryRecord(db.Model):
    __tablename__ = 'entry_records'

    id = db.Column(db.String(36), primary_key=True, default=generate_uuid)
    principal_id = db.Column(db.String(36), db.ForeignKey('principals.id'), nullable=False, index=True)
    guard_id = db.Column(db.String(36), db.ForeignKey('principals.id'), nullable=False)
    type = db.Column(db.Enum(EntryType, native_enum=False, length=8), nullable=False)
    location = db.Column(db.String(200), nullable=False)
    timestamp = db.Column(db.DateTime, nullable=False, default=utcnow, index=True)

    principal = db.relationship('Principal', foreign_keys=[principal_id], lazy='joined')
    guard = db.relationship('Principal', foreign_keys=[guard_id], lazy='joined')

    def to_dict(self):
        return {
            'id': self.id,
            'userId': self.principal_id,
            'guardId': self.guard_id,
            'type': self.type.value,
            'location': self.location,
            'timestamp': isoformat(self.timestamp),
            'user': {
                'firstName': self.principal.first_name,
                'lastName': self.principal.last_name,
                'role': self.principal.role.value,
                'email': self.principal.email
            },
            'guard': {
                'firstName': self.guard.first_name,
                'lastName': self.guard.last_name
            }
        }

    def __repr__(self):
        return f'<EntryRecord {self.type.value} {self.principal_id} at {self.timestamp}>'
