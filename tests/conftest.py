import pytest

PROSE = (
    b"It was the best of times, it was the worst of times, it was the age of wisdom, "
    b"it was the age of foolishness, it was the epoch of belief, it was the epoch of "
    b"incredulity, it was the season of light, it was the season of darkness, it was "
    b"the spring of hope, it was the winter of despair, we had everything before us, "
    b"we had nothing before us, we were all going direct to heaven, we were all going "
    b"direct the other way. In short, the period was so far like the present period, "
    b"that some of its noisiest authorities insisted on its being received, for good "
    b"or for evil, in the superlative degree of comparison only. There were a king "
    b"with a large jaw and a queen with a plain face, on the throne of England; there "
    b"were a king with a large jaw and a queen with a fair face, on the throne of "
    b"France. In both countries it was clearer than crystal to the lords of the state "
    b"preserves of loaves and fishes, that things in general were settled for ever. "
    b"It was the year of our lord one thousand seven hundred and seventy five. "
    b"Spiritual revelations were conceded to England at that favoured period, as at "
    b"this. Mrs. Southcott had recently attained her five and twentieth blessed "
    b"birthday, of whom a prophetic private in the life guards had heralded the "
    b"sublime appearance by announcing that arrangements were made for the "
    b"swallowing up of London and Westminster."
)

@pytest.fixture
def prose():
    return PROSE
