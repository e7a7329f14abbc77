from gateflow.models.base import db, generate_uuid, utcnow, isoformat
from gateflow.models.enums import Role


class Principal(db.Model):
    __tablename__ = 'principals'

    id = db.Column(db.String(36), primary_key=True, default=generate_uuid)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)
    first_name = db.Column(db.String(100), nullable=False)
    last_name = db.Column(db.String(100), nullable=False)
    role = db.Column(db.Enum(Role, native_enum=False, length=16), nullable=False, default=Role.STUDENT)
    contact_number = db.Column(db.String(50))
    qr_token = db.Column(db.String(64), unique=True, nullable=False, index=True)
    is_active = db.Column(db.Boolean, nullable=False, default=True)
    reset_token = db.Column(db.String(128), index=True)
    reset_expiry = db.Column(db.DateTime)
    created_at = db.Column(db.DateTime, default=utcnow)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)

    @property
    def full_name(self):
        return f"{self.first_name} {self.last_name}".strip()

    def to_dict(self):
        # Password hash and reset secret never leave the store
        return {
            'id': self.id,
            'email': self.email,
            'firstName': self.first_name,
            'lastName': self.last_name,
            'role': self.role.value,
            'contactNumber': self.contact_number,
            'qrToken': self.qr_token,
            'isActive': self.is_active,
            'createdAt': isoformat(self.created_at),
            'updatedAt': isoformat(self.updated_at)
        }

    def to_summary(self):
        return {
            'id': self.id,
            'firstName': self.first_name,
            'lastName': self.last_name,
            'email': self.email,
            'role': self.role.value,
            'isActive': self.is_active
        }

    def __repr__(self):
        return f'<Principal {self.email} ({self.role.value})>'
