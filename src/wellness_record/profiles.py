"""NDHM profile URLs, code systems and fixed coding literals.

Single source of truth for every URI and code the document generator emits.
Codes that label observations are defaults only; the active values come from
``TerminologyConfig`` so they can be corrected without code changes.
"""

# NRCeS / NDHM structure definitions
PATIENT_PROFILE = "https://nrces.in/ndhm/fhir/r4/StructureDefinition/Patient"
PRACTITIONER_PROFILE = "https://nrces.in/ndhm/fhir/r4/StructureDefinition/Practitioner"
WELLNESS_RECORD_PROFILE = "https://nrces.in/ndhm/fhir/r4/StructureDefinition/WellnessRecord"
PHYSICAL_ACTIVITY_PROFILE = (
    "https://nrces.in/ndhm/fhir/r4/StructureDefinition/ObservationPhysicalActivity"
)
GENERAL_ASSESSMENT_PROFILE = (
    "https://nrces.in/ndhm/fhir/r4/StructureDefinition/ObservationGeneralAssessment"
)
LIFESTYLE_PROFILE = "https://nrces.in/ndhm/fhir/r4/StructureDefinition/ObservationLifestyle"

# Code systems
LOINC_SYSTEM = "http://loinc.org"
SNOMED_SYSTEM = "http://snomed.info/sct"
UCUM_SYSTEM = "http://unitsofmeasure.org"
IDENTIFIER_TYPE_SYSTEM = "http://terminology.hl7.org/CodeSystem/v2-0203"

# Observation codings must fall in one of these slices
APPROVED_OBSERVATION_SYSTEMS = (LOINC_SYSTEM, SNOMED_SYSTEM)

XHTML_NAMESPACE = "http://www.w3.org/1999/xhtml"

# Identifier type codes (v2-0203) and their official displays
IDENTIFIER_TYPES = {
    "PI": "Patient internal identifier",
    "PN": "Person number",
    "MR": "Medical record number",
    "MD": "Medical License number",
}

# Default identifier systems
ABHA_NUMBER_SYSTEM = "https://healthid.abdm.gov.in"
ABHA_ADDRESS_SYSTEM = "https://healthid.abdm.gov.in/address"
MRN_SYSTEM = "http://hospital.example/mrn"
GENERATED_ID_SYSTEM = "urn:uuid"
PRACTITIONER_LICENSE_SYSTEM = "https://ndhm.in/practitioner/license"
PRACTITIONER_LOGIN_SYSTEM = "https://your.system/login-id"
BUNDLE_IDENTIFIER_SYSTEM = "https://nrces.in/ids/bundles"

DOCUMENT_TITLE = "Wellness Record"
NOT_PROVIDED = "Not provided"
PAIN_QUESTION = "Any current pain?"

# Vital sign presets of the wellness form: (key, label, unit, LOINC code)
VITAL_PRESETS = (
    ("hr", "Heart rate", "beats/min", "8867-4"),
    ("systolic", "Systolic blood pressure", "mmHg", "8480-6"),
    ("diastolic", "Diastolic blood pressure", "mmHg", "8462-4"),
    ("temp", "Body temperature", "Cel", "8310-5"),
    ("spo2", "SpO2", "%", "59408-5"),
    ("height", "Height", "cm", "8302-2"),
    ("weight", "Weight", "kg", "29463-7"),
    ("bmi", "BMI", "kg/m2", "39156-5"),
)
