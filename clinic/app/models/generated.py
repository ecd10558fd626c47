from sqlalchemy import Column, ForeignKey, Integer, Table, Text, UniqueConstraint, text

from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()
metadata = Base.metadata


class Rooms(Base):
    __tablename__ = 'rooms'

    id = Column(Text, primary_key=True)
    name = Column(Text, nullable=False)
    display_order = Column(Integer)
    is_active = Column(Integer, nullable=False, server_default=text('1'))

    appointments = relationship('Appointments', back_populates='room')


class Therapists(Base):
    __tablename__ = 'therapists'

    id = Column(Text, primary_key=True)
    name = Column(Text, nullable=False)
    gender = Column(Text, nullable=False)
    display_order = Column(Integer)
    is_active = Column(Integer, nullable=False, server_default=text('1'))

    availability = relationship('TherapistAvailability', back_populates='therapist')
    appointments = relationship(
        'Appointments',
        secondary='appointment_therapists',
        viewonly=True,
    )


class TherapistAvailability(Base):
    __tablename__ = 'therapist_availability'
    __table_args__ = (
        UniqueConstraint('therapist_id', 'date', 'slot'),
    )

    id = Column(Integer, primary_key=True)
    therapist_id = Column(ForeignKey('therapists.id', ondelete='CASCADE'), nullable=False)
    date = Column(Text, nullable=False)  # YYYY-MM-DD
    slot = Column(Text, nullable=False)  # HH:MM

    therapist = relationship('Therapists', back_populates='availability')


class Patients(Base):
    __tablename__ = 'patients'

    id = Column(Text, primary_key=True)
    name = Column(Text, nullable=False)
    gender = Column(Text)
    mobile = Column(Text)


t_appointment_therapists = Table(
    'appointment_therapists', metadata,
    Column('appointment_id', ForeignKey('appointments.id', ondelete='CASCADE'), nullable=False),
    Column('therapist_id', ForeignKey('therapists.id', ondelete='CASCADE'), nullable=False),
    Column('position', Integer, nullable=False, server_default=text('0')),
    UniqueConstraint('appointment_id', 'therapist_id')
)


class Appointments(Base):
    __tablename__ = 'appointments'

    id = Column(Text, primary_key=True)
    date = Column(Text, nullable=False)  # YYYY-MM-DD
    slot = Column(Text, nullable=False)  # HH:MM
    room_id = Column(ForeignKey('rooms.id'))
    client_id = Column(Text, nullable=False)
    duration = Column(Integer, nullable=False, server_default=text('60'))
    tab = Column(Text, nullable=False, server_default=text("'Therapy'"))
    status = Column(Text, nullable=False, server_default=text("'scheduled'"))
    created_at = Column(Text, nullable=False, server_default=text('CURRENT_TIMESTAMP'))

    room = relationship('Rooms', back_populates='appointments')
    therapists = relationship(
        'Therapists',
        secondary=t_appointment_therapists,
        order_by=t_appointment_therapists.c.position,
        viewonly=True,
    )
