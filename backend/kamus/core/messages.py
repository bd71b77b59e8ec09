"""User-facing response messages (Indonesian)."""

FORBIDDEN = "Forbidden"

DEFINITION_CREATED = "Definisimu akan segera ditinjau"
DEFINITION_CREATE_FAILED = "Gagal menambahkan definisi"
DEFINITION_NOT_FOUND = "Definisi tidak ditemukan"

DEFINITION_APPROVED = "Berhasil menyetujui definisi"
DEFINITION_ALREADY_APPROVED = "Definisi sudah disetujui"
DEFINITION_APPROVE_FAILED = "Gagal menyetujui definisi"

REACTION_SAVED = "Berhasil menambahkan reaksi definisi"
REACTION_FAILED = "Gagal menambahkan reaksi definisi"

PROFILE_UPDATED = "Berhasil memperbarui data pengguna"
PROFILE_UPDATE_FAILED = "Gagal memperbarui data pengguna"
USERNAME_TAKEN = "Username sudah digunakan"
USERNAME_GENERATION_FAILED = "Gagal membuat nama pengguna"

LOGIN_FAILED = "Gagal masuk"

LIST_FAILED = "Gagal memuat definisi"

REQUIRED_FIELD = {
    "id": "ID wajib diisi",
    "reaction_id": "ID wajib disertakan",
    "word": "Kata wajib diisi",
    "definition": "Definisi wajib diisi",
    "example": "Contoh wajib diisi",
    "username": "Nama pengguna wajib diisi",
    "type": "Tipe wajib disertakan",
    "subaction": "Aksi wajib disertakan",
}
