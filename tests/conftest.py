"""Shared fixtures: a sample AAMVA payload and a checksum-valid TD3 MRZ."""
import pytest


MRZ_LINE1 = "P<USADOE<<JOHN<<<<<<<<<<<<<<<<<<<<<<<<<<<<<<"
MRZ_LINE2 = "1234567897USA9001158M2901019<<<<<<<<<<<<<<04"


@pytest.fixture
def mrz_lines():
    return [MRZ_LINE1, MRZ_LINE2]


@pytest.fixture
def passport_ocr_lines():
    return [
        "UNITED STATES OF AMERICA",
        "PASSPORT",
        "Surname DOE",
        MRZ_LINE1,
        MRZ_LINE2,
    ]


@pytest.fixture
def aamva_payload():
    return "\n".join([
        "@",
        "ANSI 636014080102DL00410288ZC03290024DL",
        "DAQD1234567",
        "DCSSMITH",
        "DACJANE",
        "DADMARIE",
        "DBB01152000",
        "DBA01152030",
        "DBC2",
        "DAG123 MAIN ST",
        "DAISACRAMENTO",
        "DAJCA",
        "DAK958220000",
        "DCGUSA",
    ])
