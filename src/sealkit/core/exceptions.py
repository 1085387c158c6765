"""
Exceptions for SealKit
This is placed such that there is a general error catcher
"""


class SealKitError(Exception):
    # general container for errors
    pass


class EntropyUnavailableError(SealKitError):
    # raised when no secure random source can be constructed (fatal)
    pass


class InvalidKeyLengthError(SealKitError):
    # raised when key bytes don't match the sizes accepted by the algorithm
    pass


class MalformedBlobError(SealKitError):
    # raised when a blob is too short to hold its iv + salt prefix
    pass


class DecryptionError(SealKitError):
    # raised when final-block decryption fails (bad padding, bad length, wrong key)
    pass


class AuthenticationFailureError(DecryptionError):
    # raised on an AEAD tag mismatch, i.e. tampered ciphertext/iv or wrong key
    pass
