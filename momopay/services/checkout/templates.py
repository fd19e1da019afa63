"""HTML rendering for the payment form, error page and success page.

Pure functions from data to markup; every interpolated value is escaped.
"""

import html
import json
from collections.abc import Sequence
from decimal import Decimal

from momopay.services.checkout.schemas import AMOUNT_QUANTUM, PaymentMethod, amount_in_range

INTL_TEL_INPUT_CDN = "https://cdn.jsdelivr.net/npm/intl-tel-input@24.7.0/build"

_BASE_CSS = """
    body { margin:0; min-height:100vh; background:#000; color:#fff;
           font-family:ui-sans-serif,Segoe UI,Roboto,Arial; display:flex;
           justify-content:center; align-items:center; }
    .card { width:100%; max-width:480px; margin:16px; padding:24px;
            border:2px solid #FFDB15; border-radius:10px; background:#0b0b0b; }
    h1 { color:#FFDB15; margin:0 0 12px 0; font-size:24px; }
    .muted { color:#a3a3a3; font-size:14px; }
    .button { display:inline-block; margin-top:16px; padding:12px 20px; border:none;
              border-radius:6px; background:#FFDB15; color:#000; font-weight:600;
              text-decoration:none; cursor:pointer; }
"""


def format_amount(amount: Decimal) -> str:
    """Plain decimal text without exponent or trailing zeros.

    Values outside the accepted amount range are shown as given.
    """

    if not amount_in_range(amount):
        return str(amount)
    return format(amount.quantize(AMOUNT_QUANTUM).normalize(), "f")


def _page(title: str, body: str, head_extra: str = "", css: str = "") -> str:
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>{html.escape(title)}</title>
  {head_extra}
  <style>{_BASE_CSS}{css}</style>
</head>
<body>
{body}
</body>
</html>
"""


def _method_option(method: PaymentMethod, label: str, chosen: PaymentMethod | None) -> str:
    marker = " selected" if chosen is method else ""
    return f'<option value="{method.value}"{marker}>{label}</option>'


_FORM_CSS = """
    .form-group { margin-bottom:14px; }
    label { display:block; margin-bottom:6px; font-size:14px; }
    input, select { width:100%; box-sizing:border-box; padding:10px; border-radius:6px;
                    border:1px solid #404040; background:#171717; color:#fff; font-size:16px; }
    input.error { border-color:#ef4444; }
    input.valid { border-color:#22c55e; }
    .hidden { display:none; }
    .summary { margin-bottom:18px; padding:12px; border-radius:6px; background:#171717; }
    .form-error { margin-bottom:14px; padding:10px; border-radius:6px;
                  background:#450a0a; color:#fecaca; }
    #phoneError { display:none; color:#f87171; font-size:13px; margin-top:6px; }
    .iti { width:100%; }
"""


def render_payment_form(
    *,
    amount: Decimal,
    product_name: str,
    currency: str,
    error_title: str | None = None,
    error: str | None = None,
    first_name: str = "",
    last_name: str = "",
    phone_number: str = "",
    payment_method: PaymentMethod | None = None,
    phone_initial_country: str = "sn",
    phone_preferred_countries: Sequence[str] = ("sn", "ci", "ml", "bf", "gn"),
) -> str:
    """Payment form for one product, optionally prefilled and with an inline error.

    The visible phone input is lenient: intl-tel-input formats it for display
    and writes the E.164 value into the hidden `phoneNumber` field on submit.
    The server still validates that hidden value strictly.
    """

    esc = html.escape
    amount_text = format_amount(amount)
    error_block = ""
    if error:
        heading = f"<strong>{esc(error_title)}</strong><br>" if error_title else ""
        error_block = f'<div class="form-error" role="alert">{heading}{esc(error)}</div>'
    auth_hidden = "" if payment_method is PaymentMethod.ORANGE_MONEY else " hidden"
    auth_required = " required" if payment_method is PaymentMethod.ORANGE_MONEY else ""
    initial_country = json.dumps(phone_initial_country)
    preferred = json.dumps(list(phone_preferred_countries))

    body = f"""<div class="card">
  <h1>Payment</h1>
  <div class="summary">
    <div class="muted">Product</div>
    <div>{esc(product_name)}</div>
    <div class="muted" style="margin-top:8px">Amount</div>
    <div>{esc(amount_text)} {esc(currency)}</div>
  </div>
  {error_block}
  <form id="paymentForm" method="POST" action="/payment/process">
    <input type="hidden" name="amount" value="{esc(amount_text)}">
    <input type="hidden" name="productName" value="{esc(product_name)}">
    <div class="form-group">
      <label for="firstName">First Name *</label>
      <input type="text" id="firstName" name="firstName" value="{esc(first_name)}" required>
    </div>
    <div class="form-group">
      <label for="lastName">Last Name *</label>
      <input type="text" id="lastName" name="lastName" value="{esc(last_name)}" required>
    </div>
    <div class="form-group">
      <label for="phoneNumber">Phone Number *</label>
      <input type="tel" id="phoneNumber" name="phoneNumber_display" value="{esc(phone_number)}" required>
      <input type="hidden" id="phoneNumberFull" name="phoneNumber">
      <div id="phoneError"></div>
    </div>
    <div class="form-group">
      <label for="paymentMethod">Payment Method *</label>
      <select id="paymentMethod" name="paymentMethod" required>
        <option value="">Choose a payment method</option>
        {_method_option(PaymentMethod.WAVE, 'Wave', payment_method)}
        {_method_option(PaymentMethod.ORANGE_MONEY, 'Orange Money', payment_method)}
      </select>
    </div>
    <div class="form-group{auth_hidden}" id="authCodeGroup">
      <label for="authorizationCode">Authorization Code *</label>
      <input type="text" id="authorizationCode" name="authorizationCode"{auth_required}>
      <div class="muted">Dial #144#391# on your Orange line to get a code.</div>
    </div>
    <button type="submit" class="button">Pay {esc(amount_text)} {esc(currency)}</button>
  </form>
</div>
<script src="{INTL_TEL_INPUT_CDN}/js/intlTelInput.min.js"></script>
<script>
  const form = document.querySelector("#paymentForm");
  const methodSelect = document.querySelector("#paymentMethod");
  const authCodeGroup = document.querySelector("#authCodeGroup");
  const authCodeInput = document.querySelector("#authorizationCode");
  methodSelect.addEventListener('change', function() {{
    if (methodSelect.value === 'ORANGE_MONEY') {{
      authCodeGroup.classList.remove('hidden');
      authCodeInput.setAttribute('required', 'required');
    }} else {{
      authCodeGroup.classList.add('hidden');
      authCodeInput.removeAttribute('required');
    }}
  }});

  const phoneInput = document.querySelector("#phoneNumber");
  const phoneNumberFull = document.querySelector("#phoneNumberFull");
  const errorContainer = document.querySelector("#phoneError");
  let iti = null;
  if (window.intlTelInput) {{
    iti = window.intlTelInput(phoneInput, {{
      initialCountry: {initial_country},
      preferredCountries: {preferred},
      formatAsYouType: true,
      formatOnDisplay: true,
      separateDialCode: true,
      countrySearch: true,
      useFullscreenPopup: true,
      strictMode: true,
      validationNumberTypes: ["MOBILE"],
      utilsScript: "{INTL_TEL_INPUT_CDN}/js/utils.js"
    }});
  }}

  function getErrorMessage(errorCode) {{
    if (window.intlTelInput && window.intlTelInput.utils) {{
      const validationError = window.intlTelInput.utils.validationError;
      const errorMap = {{
        [validationError.INVALID_COUNTRY_CODE]: 'Invalid country code',
        [validationError.TOO_SHORT]: 'Phone number is too short',
        [validationError.TOO_LONG]: 'Phone number is too long',
        [validationError.NOT_A_NUMBER]: 'Invalid phone number',
        [validationError.INVALID_LENGTH]: 'Invalid phone number length'
      }};
      return errorMap[errorCode] || 'Please enter a valid phone number';
    }}
    return 'Please enter a valid phone number';
  }}

  function showPhoneError(message) {{
    phoneInput.classList.add('error');
    phoneInput.classList.remove('valid');
    errorContainer.textContent = message;
    errorContainer.style.display = 'block';
  }}

  phoneInput.addEventListener('blur', function() {{
    if (iti && phoneInput.value.trim()) {{
      if (iti.isValidNumber()) {{
        phoneInput.classList.remove('error');
        phoneInput.classList.add('valid');
        errorContainer.style.display = 'none';
      }} else {{
        showPhoneError(getErrorMessage(iti.getValidationError()));
      }}
    }}
  }});

  phoneInput.addEventListener('input', function() {{
    phoneInput.classList.remove('error', 'valid');
    errorContainer.style.display = 'none';
  }});

  form.addEventListener('submit', function(e) {{
    let phoneNumber;
    if (iti) {{
      if (!iti.isValidNumber()) {{
        e.preventDefault();
        showPhoneError(getErrorMessage(iti.getValidationError()));
        return;
      }}
      phoneNumber = iti.getNumber();
    }} else {{
      phoneNumber = phoneInput.value.replace(/[\\s-]/g, '');
      if (!phoneNumber) {{
        e.preventDefault();
        showPhoneError('Please enter a phone number');
        return;
      }}
      if (!phoneNumber.startsWith('+')) {{
        phoneNumber = '+221' + phoneNumber;
      }}
    }}
    phoneNumberFull.value = phoneNumber;
  }});
</script>"""
    head_extra = f'<link rel="stylesheet" href="{INTL_TEL_INPUT_CDN}/css/intlTelInput.css">'
    return _page("Payment", body, head_extra=head_extra, css=_FORM_CSS)


def render_error_page(
    *,
    message: str,
    details: str,
    title: str = "Payment Error",
    reference: str | None = None,
) -> str:
    """Error page with a short heading, the specific reason and an optional reference id."""

    esc = html.escape
    reference_block = ""
    if reference:
        reference_block = f'<p class="muted">Reference: {esc(reference)}</p>'
    body = f"""<div class="card" style="text-align:center">
  <h1>{esc(message)}</h1>
  <p>{esc(details)}</p>
  {reference_block}
  <a class="button" href="javascript:history.back()">Go back</a>
</div>"""
    return _page(title, body)


def render_success_page(*, transaction_id: str, amount: Decimal, product_name: str, currency: str) -> str:
    esc = html.escape
    body = f"""<div class="card" style="text-align:center">
  <h1>Payment initiated</h1>
  <p>Your payment request was accepted. Confirm it on your phone if prompted.</p>
  <p class="muted">Transaction ID</p>
  <p>{esc(transaction_id)}</p>
  <p class="muted">Product</p>
  <p>{esc(product_name)}</p>
  <p class="muted">Amount</p>
  <p>{esc(format_amount(amount))} {esc(currency)}</p>
</div>"""
    return _page("Payment Successful", body)
