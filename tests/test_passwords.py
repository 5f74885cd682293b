from servicedesk.security import PasswordHasher


def test_hash_and_verify():
    hasher = PasswordHasher(rounds=4)
    stored = hasher.hash("s3cret!")

    assert stored != "s3cret!"
    assert stored.startswith("$2")
    assert hasher.verify("s3cret!", stored)
    assert not hasher.verify("wrong", stored)


def test_hashes_are_salted():
    hasher = PasswordHasher(rounds=4)
    assert hasher.hash("same-password") != hasher.hash("same-password")


def test_verify_handles_empty_and_malformed_input():
    hasher = PasswordHasher(rounds=4)
    stored = hasher.hash("s3cret!")

    assert not hasher.verify("", stored)
    assert not hasher.verify("s3cret!", None)
    assert not hasher.verify("s3cret!", "not-a-bcrypt-hash")


def test_long_passwords_are_cut_at_72_bytes():
    hasher = PasswordHasher(rounds=4)
    password = "x" * 100
    stored = hasher.hash(password)

    assert hasher.verify(password, stored)
    assert hasher.verify("x" * 72, stored)
