import pytest

from app.session_store import reset_sessions
from core.conversation import ConversationSession
from core.listing_store import ListingStore


SAMPLE_LISTINGS = [
    {
        "StreetNumber": "123",
        "StreetDirPrefix": "",
        "StreetName": "Main",
        "StreetSuffix": "St",
        "City": "Gardena",
        "StateOrProvince": "",
        "PostalCode": "90247",
        "ListPrice": "500000",
        "BedroomsTotal": "3",
        "BathroomsTotalInteger": "2",
        "LivingArea": "1450",
        "YearBuilt": "1958",
        "PropertyType": "Residential",
        "ListingTerms": "Cash, Conventional, FHA",
        "PublicRemarks": "Charming single story home.",
        "PrivateRemarks": "",
        "ListAgentFirstName": "Dana",
        "ListAgentLastName": "Lee",
        "ListAgentEmail": "dana@example.com",
    },
    {
        "StreetNumber": "8450",
        "StreetDirPrefix": "N",
        "StreetName": "Maclay",
        "StreetSuffix": "Ave",
        "City": "San Fernando",
        "StateOrProvince": "CA",
        "PostalCode": "91340",
        "ListPrice": "875000",
        "BedroomsTotal": "4",
        "BathroomsTotalInteger": "3",
        "LivingArea": "2100",
        "YearBuilt": "1989",
        "PropertyType": "Residential",
        "ListingTerms": "Cash, VA Loan",
        "PublicRemarks": "Corner lot with pool.",
        "PrivateRemarks": "Lockbox on side gate.",
        "ListAgentFirstName": "Sam",
        "ListAgentLastName": "Ortiz",
        "ListAgentEmail": "sam@example.com",
    },
    {
        "StreetNumber": "1021",
        "StreetDirPrefix": "",
        "StreetName": "Pico",
        "StreetSuffix": "St",
        "City": "San Fernando",
        "StateOrProvince": "CA",
        "PostalCode": "91340",
        "ListPrice": "Call for price",
        "BedroomsTotal": "",
        "BathroomsTotalInteger": "1",
        "LivingArea": "",
        "YearBuilt": "1941",
        "PropertyType": "Residential",
        "ListingTerms": "Conventional",
        "PublicRemarks": "",
        "PrivateRemarks": "",
        "ListAgentFirstName": "",
        "ListAgentLastName": "",
        "ListAgentEmail": "",
    },
]


@pytest.fixture
def store() -> ListingStore:
    return ListingStore.from_records(SAMPLE_LISTINGS)


@pytest.fixture
def empty_store() -> ListingStore:
    return ListingStore.empty()


@pytest.fixture
def session() -> ConversationSession:
    return ConversationSession(session_id="test")


@pytest.fixture(autouse=True)
def _clean_sessions():
    reset_sessions()
    yield
    reset_sessions()
