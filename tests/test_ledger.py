from parkpass.models import ParkingSpot
from parkpass.spots.ledger import SlotLedger


def _available(db, spot_id):
    db.expire_all()
    return db.get(ParkingSpot, spot_id).available_slots


def test_decrement_stops_at_zero(db, owner, make_spot):
    spot = make_spot(owner, total_slots=2)
    ledger = SlotLedger(db)

    assert ledger.decrement(spot.id)
    assert ledger.decrement(spot.id)
    assert not ledger.decrement(spot.id)
    db.commit()

    assert _available(db, spot.id) == 0


def test_increment_never_exceeds_total(db, owner, make_spot):
    spot = make_spot(owner, total_slots=2, available_slots=1)
    ledger = SlotLedger(db)

    assert ledger.increment(spot.id)
    assert not ledger.increment(spot.id)
    db.commit()

    assert _available(db, spot.id) == 2


def test_unknown_spot_is_a_no_op(db):
    ledger = SlotLedger(db)
    assert not ledger.decrement(999)
    assert not ledger.increment(999)
