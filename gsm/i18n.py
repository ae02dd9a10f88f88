"""Display labels in English and Tamil"""

LANGUAGES = ('en', 'ta')

TRANSLATIONS = {
    'appName': {'en': 'GSM Schemes', 'ta': 'ஜி.எஸ்.எம் திட்டங்கள்'},
    'dashboard': {'en': 'Dashboard', 'ta': 'முகப்பு'},
    'khss': {'en': 'KHSS Scheme', 'ta': 'கே.எச்.எஸ்.எஸ் திட்டம்'},
    'dss': {'en': 'DSS Scheme', 'ta': 'தீபாவளி சேமிப்பு திட்டம்'},
    'finance': {'en': 'Finance', 'ta': 'நிதி'},
    'addUser': {'en': 'Add Member', 'ta': 'உறுப்பினர் சேர்'},
    'addLoginUser': {'en': 'Add Operator', 'ta': 'நிர்வாகி சேர்'},
    'userDetails': {'en': 'User Details', 'ta': 'பயனர் விவரங்கள்'},
    'schemeSettings': {'en': 'Scheme Settings', 'ta': 'திட்ட அமைப்புகள்'},
    'login': {'en': 'Login', 'ta': 'உள்நுழை'},
    'logout': {'en': 'Logout', 'ta': 'வெளியேறு'},
    'register': {'en': 'Register', 'ta': 'பதிவு செய்'},
    'username': {'en': 'Username', 'ta': 'பயனர் பெயர்'},
    'password': {'en': 'Password', 'ta': 'கடவுச்சொல்'},
    'name': {'en': 'Name', 'ta': 'பெயர்'},
    'phone': {'en': 'Phone', 'ta': 'தொலைபேசி'},
    'address': {'en': 'Address', 'ta': 'முகவரி'},
    'email': {'en': 'Email', 'ta': 'மின்னஞ்சல்'},
    'role': {'en': 'Role', 'ta': 'பங்கு'},
    'admin': {'en': 'Admin', 'ta': 'நிர்வாகி'},
    'basic': {'en': 'Basic', 'ta': 'அடிப்படை'},
    'numSchemes': {'en': 'Number of Schemes', 'ta': 'திட்டங்களின் எண்ணிக்கை'},
    'totalAmount': {'en': 'Total Amount', 'ta': 'மொத்த தொகை'},
    'paidAmount': {'en': 'Paid Amount', 'ta': 'செலுத்திய தொகை'},
    'balance': {'en': 'Balance', 'ta': 'மீதி'},
    'amount': {'en': 'Amount', 'ta': 'தொகை'},
    'date': {'en': 'Date', 'ta': 'தேதி'},
    'method': {'en': 'Payment Method', 'ta': 'செலுத்தும் முறை'},
    'paymentHistory': {'en': 'Payment History', 'ta': 'பணம் செலுத்திய வரலாறு'},
    'makePayment': {'en': 'Receive Payment', 'ta': 'பணம் பெறு'},
    'itemSelection': {'en': 'Item Selection', 'ta': 'பொருள் தேர்வு'},
    'copperKudam': {'en': 'Copper Kudam', 'ta': 'செப்பு குடம்'},
    'kuthuVizhakku': {'en': 'Kuthu Vizhakku', 'ta': 'குத்து விளக்கு'},
    'brassVessel': {'en': 'Brass Vessel', 'ta': 'பித்தளை பாத்திரம்'},
    'silverCoin': {'en': 'Silver Coin', 'ta': 'வெள்ளி நாணயம்'},
    'unitPrice': {'en': 'Unit Price', 'ta': 'அலகு விலை'},
    'search': {'en': 'Search by name or ID', 'ta': 'பெயர் அல்லது ஐடி மூலம் தேடு'},
    'submit': {'en': 'Submit', 'ta': 'சமர்ப்பி'},
    'save': {'en': 'Save', 'ta': 'சேமி'},
    'cancel': {'en': 'Cancel', 'ta': 'ரத்து'},
    'edit': {'en': 'Edit', 'ta': 'திருத்து'},
    'delete': {'en': 'Delete', 'ta': 'நீக்கு'},
    'deleteConfirm': {'en': 'Are you sure you want to delete?', 'ta': 'நிச்சயமாக நீக்க வேண்டுமா?'},
    'noUsersFound': {'en': 'No users found', 'ta': 'பயனர்கள் இல்லை'},
    'operators': {'en': 'Operators', 'ta': 'நிர்வாகிகள்'},
    'recentMembers': {'en': 'Recent Members', 'ta': 'சமீபத்திய உறுப்பினர்கள்'},
    'invalidPhone': {'en': 'Phone number must be exactly 10 digits', 'ta': 'தொலைபேசி எண் 10 இலக்கங்களாக இருக்க வேண்டும்'},
    'invalidAmount': {'en': 'Invalid amount.', 'ta': 'தவறான தொகை.'},
    'invalidCredentials': {'en': 'Invalid credentials', 'ta': 'தவறான விவரங்கள்'},
    'paymentReceived': {'en': 'Payment received.', 'ta': 'பணம் பெறப்பட்டது.'},
    'settingsSaved': {'en': 'Settings saved.', 'ta': 'அமைப்புகள் சேமிக்கப்பட்டன.'},
    'success': {'en': 'Success.', 'ta': 'வெற்றி.'},
    'language': {'en': 'தமிழ்', 'ta': 'English'},
}


def translate(key, lang='en'):
    """Label for ``key`` in ``lang``, falling back to the key itself"""
    entry = TRANSLATIONS.get(key)
    if not entry:
        return key
    return entry.get(lang) or entry.get('en') or key


def next_language(lang):
    return 'ta' if lang == 'en' else 'en'
