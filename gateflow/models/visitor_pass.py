from gateflow.models.base import db, generate_uuid, utcnow, isoformat
from gateflow.models.enums import VisitorStatus


class VisitorPass(db.Model):
    __tablename__ = 'visitor_passes'

    id = db.Column(db.String(36), primary_key=True, default=generate_uuid)
    full_name = db.Column(db.String(200), nullable=False)
    contact_number = db.Column(db.String(50), nullable=False)
    email = db.Column(db.String(255))
    address = db.Column(db.String(255))
    purpose = db.Column(db.Text, nullable=False)
    person_to_visit = db.Column(db.String(200), nullable=False)
    visit_date = db.Column(db.DateTime, nullable=False)
    time_window_start = db.Column(db.DateTime, nullable=False)
    time_window_end = db.Column(db.DateTime, nullable=False)
    status = db.Column(db.Enum(VisitorStatus, native_enum=False, length=16), nullable=False,
                       default=VisitorStatus.PENDING, index=True)
    qr_token = db.Column(db.String(64), unique=True, index=True)
    approved_by_id = db.Column(db.String(36), db.ForeignKey('principals.id'))
    created_at = db.Column(db.DateTime, default=utcnow)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)

    approved_by = db.relationship('Principal', foreign_keys=[approved_by_id], lazy='joined')

    def to_dict(self):
        approver = None
        if self.approved_by is not None:
            approver = {
                'firstName': self.approved_by.first_name,
                'lastName': self.approved_by.last_name
            }
        return {
            'id': self.id,
            'fullName': self.full_name,
            'contactNumber': self.contact_number,
            'email': self.email,
            'address': self.address,
            'purpose': self.purpose,
            'personToVisit': self.person_to_visit,
            'visitDate': isoformat(self.visit_date),
            'timeWindowStart': isoformat(self.time_window_start),
            'timeWindowEnd': isoformat(self.time_window_end),
            'status': self.status.value,
            'qrToken': self.qr_token,
            'approvedById': self.approved_by_id,
            'approvedBy': approver,
            'createdAt': isoformat(self.created_at),
            'updatedAt': isoformat(self.updated_at)
        }

    def __repr__(self):
        return f'<VisitorPass {self.full_name} [{self.status.value}]>'
