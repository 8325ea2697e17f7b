from django import forms

from .models import FuelRecord, FuelRequest


class FuelRequestForm(forms.Form):
    target_type = forms.ChoiceField(choices=FuelRequest.TARGET_CHOICES)
    vehicle_id = forms.IntegerField(required=False)
    fuel_type_id = forms.IntegerField()
    requested_amount = forms.DecimalField()
    request_note = forms.CharField(required=False)


class FuelRequestActionForm(forms.Form):
    action = forms.ChoiceField(choices=FuelRequest.ACTION_CHOICES)
    acted_amount = forms.DecimalField(required=False)
    action_note = forms.CharField(required=False)


class FuelIssueForm(forms.Form):
    """
    Coerces the loose issue payload. Which fields are required depends on
    record_type and is decided by apps.fuel.issuance.build_issue.
    """
    record_type = forms.ChoiceField(choices=FuelRecord.TYPE_CHOICES)
    fuel_request_id = forms.IntegerField(required=False)
    vehicle_id = forms.IntegerField(required=False)
    fuel_type_id = forms.IntegerField(required=False)
    receiver_id = forms.IntegerField(required=False)
    issued_amount = forms.DecimalField()
    issue_note = forms.CharField(required=False)


class FuelReceiveForm(forms.Form):
    received_amount = forms.DecimalField()
