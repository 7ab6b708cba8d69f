from .base import db


class Swipe(db.Model):
    __tablename__ = "swipes"

    swiper = db.Column(db.String(64), primary_key=True)
    swiped = db.Column(db.String(64), primary_key=True)
    status = db.Column(db.Boolean, nullable=False)
    created_at = db.Column(db.DateTime, server_default=db.func.now())

    # One swipe per ordered pair (the composite key), and users can't swipe themselves
    __table_args__ = (
        db.CheckConstraint('swiper != swiped', name='check_no_self_swipe'),
        db.Index('idx_swipes_swiped', 'swiped'),
    )

    def __repr__(self):
        return f'<Swipe {self.swiper}->{self.swiped} {self.status}>'
