"""SM2密钥PEM/DER编解码"""

__version__ = '0.1.0'

from .cipher import PEMCipher
from .exceptions import (DecodeError, DecryptionError, EncodingError, InvalidInputError, InvalidKeyError,
                         KeyTypeError, MissingPasswordError, SMKeyError)
from .keys import (der_to_private_key, pem_to_private_key, pem_to_public_key, private_key_to_der,
                   private_key_to_encrypted_pem, private_key_to_pem, public_key_to_encrypted_pem, public_key_to_pem)
from .sm2 import SM2PrivateKey, SM2PublicKey
