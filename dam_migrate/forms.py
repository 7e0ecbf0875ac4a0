from django import forms


def brand_choices(brands):
    """
    Flatten the DAM's brand tree into select choices, sub-brands indented
    under their brand
    """
    choices = []
    for brand in brands:
        choices.append((brand["id"], brand["name"]))
        for sub_brand in brand.get("subBrands") or []:
            choices.append((sub_brand["id"], f"- {sub_brand['name']}"))
    return choices


class MigrateMediaForm(forms.Form):
    """
    Confirms the upload of a media record to the DAM and picks its brand
    """

    brand = forms.ChoiceField(required=True, label="Brand", choices=())

    def __init__(self, *args, brands=(), **kwargs):
        super().__init__(*args, **kwargs)
        self.fields["brand"].choices = brand_choices(brands)
